"""Vertex clean-up for planar polylines.

Collinear-vertex removal runs the Ramer-Douglas-Peucker implementation of the
``simplification`` library in a 2D frame on the curve's fitted plane, so it
works for curves in any plane orientation.
"""

import numpy as np
from simplification.cutil import simplify_coords_idx as _rdp_indices

from .core.geometry import PlaneFrame, Polyline
from .core.primitives import fit_plane, point_segment_square_distance
from .core.tolerance import DISTANCE_TOLERANCE


# ============================================================================
# Private processing functions (work with numpy arrays)
# ============================================================================

def _remove_duplicate_vertices(
    vertices: np.ndarray,
    tolerance: float = DISTANCE_TOLERANCE
) -> np.ndarray:
    """Internal function: Remove consecutive duplicate vertices within tolerance.

    Args:
        vertices: Numpy array of 3D vertices (Nx3)
        tolerance: Distance tolerance for considering vertices as duplicates

    Returns:
        Numpy array of vertices with duplicates removed
    """
    if len(vertices) < 2:
        return vertices.copy()

    is_closed = len(vertices) > 2 and np.linalg.norm(vertices[0] - vertices[-1]) <= tolerance

    result = [vertices[0]]
    for i in range(1, len(vertices)):
        if np.linalg.norm(vertices[i] - result[-1]) > tolerance:
            result.append(vertices[i])

    # Closed rings keep their exact closing point
    if is_closed:
        if len(result) > 1 and np.linalg.norm(result[0] - result[-1]) <= tolerance:
            result[-1] = result[0].copy()
        else:
            result.append(result[0].copy())

    if len(result) < 2:
        return vertices[[0, -1]].copy()

    return np.array(result)


def _remove_collinear_vertices(
    vertices: np.ndarray,
    tolerance: float = DISTANCE_TOLERANCE
) -> np.ndarray:
    """Internal function: Drop vertices lying within tolerance of their chord.

    Args:
        vertices: Numpy array of 3D vertices (Nx3), closed rings repeat the
            first vertex at the end
        tolerance: Maximum deviation of a removed vertex

    Returns:
        Numpy array of the kept vertices
    """
    if len(vertices) < 3:
        return vertices.copy()

    is_closed = np.linalg.norm(vertices[0] - vertices[-1]) <= tolerance
    plane = fit_plane(vertices, tolerance)
    if plane is None:
        # Every vertex is on one line
        return vertices.copy() if is_closed else vertices[[0, -1]].copy()

    frame = PlaneFrame.from_plane(plane)
    coords = np.ascontiguousarray(frame.to_local(vertices), dtype=np.float64)

    if is_closed:
        # Split the ring at the vertex farthest from the seam so neither chord is degenerate
        far = int(np.argmax(np.linalg.norm(coords - coords[0], axis=1)))
        head = np.asarray(_rdp_indices(np.ascontiguousarray(coords[:far + 1]), tolerance), dtype=int)
        tail = np.asarray(_rdp_indices(np.ascontiguousarray(coords[far:]), tolerance), dtype=int) + far
        keep = np.concatenate([head, tail[1:]])
    else:
        keep = np.asarray(_rdp_indices(coords, tolerance), dtype=int)
    result = vertices[keep]

    # RDP always keeps the end points, so the seam of a ring needs its own test
    if is_closed and len(result) > 4:
        if point_segment_square_distance(result[0], result[-2], result[1]) <= tolerance * tolerance:
            result = np.vstack([result[1:-1], result[1:2]])

    return result.copy()


# ============================================================================
# Public API functions (work with Polylines)
# ============================================================================

def deduplicate_vertices(
    curve: Polyline,
    tolerance: float = DISTANCE_TOLERANCE
) -> Polyline:
    """Remove consecutive duplicate vertices within tolerance.

    This removes duplicates without moving the remaining vertices. Closed
    curves stay closed.

    Args:
        curve: Polyline to clean
        tolerance: Distance tolerance for considering vertices as duplicates

    Returns:
        New Polyline with duplicates removed

    Examples:
        >>> curve = Polyline([(0, 0), (0, 0), (1, 0), (1, 1)])
        >>> len(deduplicate_vertices(curve))
        3
    """
    return Polyline(_remove_duplicate_vertices(curve.points, tolerance))


def remove_collinear_vertices(
    curve: Polyline,
    tolerance: float = DISTANCE_TOLERANCE
) -> Polyline:
    """Remove vertices that lie on the straight line between their neighbours.

    Duplicate vertices are removed first. For closed curves the seam vertex is
    removed as well when it is collinear, and the ring is re-closed on the
    next vertex.

    Args:
        curve: Polyline to simplify
        tolerance: Maximum distance of a removed vertex from the simplified curve

    Returns:
        New Polyline without collinear vertices

    Examples:
        >>> square = Polyline([(0, 0), (1, 0), (2, 0), (2, 2), (0, 2), (0, 1), (0, 0)])
        >>> len(remove_collinear_vertices(square))
        5
    """
    cleaned = _remove_duplicate_vertices(curve.points, tolerance)
    return Polyline(_remove_collinear_vertices(cleaned, tolerance))


__all__ = [
    'deduplicate_vertices',
    'remove_collinear_vertices',
]
