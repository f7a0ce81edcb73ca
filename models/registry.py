from models.qualia import (
    ConsciousComplex,
    EffectiveInformationMatrix,
    QUALIA_NORMALIZATION,
    make_elements,
    normalization_covers,
)

# EI values hardcoded from Figure 2 of Tononi (2004). In a real system they
# would be derived from the complex's causal structure.
DIVERGENT_EI = [((1, 2), 2.5), ((1, 3), 2.5), ((1, 4), 2.5)]
CHAIN_EI = [((1, 2), 2.5), ((2, 3), 2.5), ((3, 4), 2.5)]

EXAMPLE_COMPLEXES = [
    {
        'name': "Divergent Complex",
        'description': "One element sends outputs to all others. This creates a simple, "
                       "centralized information structure.",
        'ei': DIVERGENT_EI,
    },
    {
        'name': "Chain Complex",
        'description': "Elements are connected in a series. Information flows sequentially "
                       "through the system.",
        'ei': CHAIN_EI,
    },
]


class ComplexRegistry:
    """
    Holds the complexes shown by the explorer and centralizes activity updates.
    Listeners are called with (complex, element) after every applied update.
    """

    def __init__(self, complexes=()):
        self.complexes = list(complexes)
        self._listeners = []

    def get(self, complex_id):
        for c in self.complexes:
            if c.id == complex_id:
                return c
        return None

    def by_name(self, name):
        for c in self.complexes:
            if c.name == name:
                return c
        return None

    def add_listener(self, callback):
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def update_activity(self, complex_id, element_id, new_level):
        """Set one element's activity. Unknown complex or element ids are ignored."""
        complex_ = self.get(complex_id)
        if complex_ is None:
            return
        element = complex_.element(element_id)
        if element is None:
            return
        element.activity_level = new_level
        for callback in list(self._listeners):
            callback(complex_, element)

    def reset(self, level=0.0):
        for c in self.complexes:
            for el in c.elements:
                self.update_activity(c.id, el.id, level)

    def snapshot(self):
        return [
            {
                'id': c.id,
                'name': c.name,
                'description': c.description,
                'activities': c.activity_vector(),
                'point': c.point_in_qualia_space(),
            }
            for c in self.complexes
        ]

    def __len__(self):
        return len(self.complexes)

    def __iter__(self):
        return iter(self.complexes)


def build_example_registry(normalization=QUALIA_NORMALIZATION):
    """Divergent and Chain complexes, all elements at rest."""
    complexes = []
    for cfg in EXAMPLE_COMPLEXES:
        ei = EffectiveInformationMatrix(cfg['ei'])
        if not normalization_covers(ei, normalization):
            print(f"[build_example_registry] Warning: {cfg['name']} max weight {ei.max_weight():.2f} "
                  f"can exceed normalization {normalization}; points may leave the plot range")
        complexes.append(ConsciousComplex(cfg['name'], cfg['description'], make_elements(), ei))
    return ComplexRegistry(complexes)


# Session-wide registry used by the explorer
registry = build_example_registry()
