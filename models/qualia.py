import uuid
import numpy as np

# Fixed divisor for the 2D projection. Sized for the shipped example tables
# (max weight 2.5, four additive terms); never recomputed from a table.
QUALIA_NORMALIZATION = 10.0
N_ELEMENTS = 4
FALLBACK_POINT = (0.0, 0.0)

# ---------- Element ----------
class ComplexElement:
    """A single element of a complex, e.g. a neuronal group, with one activity level."""

    def __init__(self, element_id, activity_level=0.0):
        self.id = element_id
        self.activity_level = activity_level

    def __repr__(self):
        return f"ComplexElement(id={self.id}, activity_level={self.activity_level:.3f})"


# ---------- Effective Information (weight table) ----------
class EffectiveInformationMatrix:
    """
    Simplified EI matrix: causal influence between unordered pairs of elements.
    Pairs are stored as frozensets so lookup(a, b) and lookup(b, a) hit the same entry.
    A missing pair means no causal relation is modeled and reads as 0.0.
    """

    def __init__(self, relationships=()):
        if hasattr(relationships, 'items'):
            relationships = relationships.items()
        self._relationships = {}
        for pair, weight in relationships:
            self._relationships[frozenset(pair)] = float(weight)

    def lookup(self, a, b):
        return self._relationships.get(frozenset((a, b)), 0.0)

    @property
    def relationships(self):
        return dict(self._relationships)

    def max_weight(self):
        if not self._relationships:
            return 0.0
        return max(self._relationships.values())

    def as_array(self, size=N_ELEMENTS):
        """Dense symmetric matrix, element id i at index i-1."""
        mat = np.zeros((size, size))
        for i in range(1, size + 1):
            for j in range(1, size + 1):
                if i != j:
                    mat[i - 1, j - 1] = self.lookup(i, j)
        return mat

    def __len__(self):
        return len(self._relationships)

    def __repr__(self):
        pairs = ", ".join(f"{tuple(sorted(p))}: {w}" for p, w in sorted(
            self._relationships.items(), key=lambda kv: sorted(kv[0])))
        return f"EffectiveInformationMatrix({{{pairs}}})"


# ---------- Conscious complex ----------
class ConsciousComplex:
    """
    An integrated system of elements. Its internal architecture, captured by the
    EI matrix, defines the geometry of its qualia space (Tononi 2004).
    """

    def __init__(self, name, description, elements, ei_matrix, complex_id=None):
        self.id = complex_id if complex_id is not None else uuid.uuid4()
        self.name = name
        self.description = description
        self.elements = list(elements)
        self.ei_matrix = ei_matrix

    def element(self, element_id):
        for el in self.elements:
            if el.id == element_id:
                return el
        return None

    def activity_vector(self):
        return [el.activity_level for el in self.elements]

    def point_in_qualia_space(self, normalization=QUALIA_NORMALIZATION):
        return compute_point(self, normalization)

    def __repr__(self):
        return f"ConsciousComplex(name={self.name!r}, activity={self.activity_vector()})"


def make_elements(n=N_ELEMENTS, activity_level=0.0):
    return [ComplexElement(i, activity_level) for i in range(1, n + 1)]


# ---------- Projection ----------
def compute_point(complex_, normalization=QUALIA_NORMALIZATION):
    """
    Toy projection of a complex's current state onto a 2D plane.
    The EI values act as weights, so the same activity pattern lands on a
    different point for complexes with different architectures.
    Only 4-element complexes are projected; anything else maps to (0, 0).
    """
    if len(complex_.elements) != N_ELEMENTS:
        return FALLBACK_POINT

    W = complex_.ei_matrix.lookup
    ax = complex_.elements[0].activity_level
    ay = complex_.elements[1].activity_level
    bx = complex_.elements[2].activity_level
    by = complex_.elements[3].activity_level

    x = ax * W(1, 2) + ay * W(2, 1) + bx * W(3, 4) + by * W(4, 3)
    y = ax * W(1, 3) + ay * W(2, 4) + bx * W(3, 1) + by * W(4, 2)
    return (x / normalization, y / normalization)


# (position -> weight pair) for each axis, same order as compute_point
_X_PAIRS = ((1, 2), (2, 1), (3, 4), (4, 3))
_Y_PAIRS = ((1, 3), (2, 4), (3, 1), (4, 2))


def project_activity_grid(ei_matrix, activities, normalization=QUALIA_NORMALIZATION):
    """Vectorised compute_point over an (N, 4) array of activity patterns -> (N, 2)."""
    acts = np.atleast_2d(np.asarray(activities, dtype=float))
    if acts.shape[1] != N_ELEMENTS:
        return np.zeros((acts.shape[0], 2))
    wx = [ei_matrix.lookup(a, b) for a, b in _X_PAIRS]
    wy = [ei_matrix.lookup(a, b) for a, b in _Y_PAIRS]
    # accumulate term by term to keep the scalar summation order
    x = acts[:, 0] * wx[0] + acts[:, 1] * wx[1] + acts[:, 2] * wx[2] + acts[:, 3] * wx[3]
    y = acts[:, 0] * wy[0] + acts[:, 1] * wy[1] + acts[:, 2] * wy[2] + acts[:, 3] * wy[3]
    return np.column_stack([x / normalization, y / normalization])


def normalization_covers(ei_matrix, normalization=QUALIA_NORMALIZATION):
    """True when the largest possible raw projection (4 * max weight) fits the divisor."""
    return N_ELEMENTS * ei_matrix.max_weight() <= normalization
