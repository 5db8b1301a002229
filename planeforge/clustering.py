"""Density-based clustering of points and arbitrary items.

Clusters grow breadth-first from every unvisited item whose neighbourhood
(the item itself plus every adjacent item) holds at least ``min_neighbors``
items. Cluster members are reported in input order, so results depend only
on the input ordering.
"""

from collections import deque
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar, Union

import numpy as np
from shapely.geometry import Point
from shapely.strtree import STRtree

from .core.errors import ConfigurationError
from .core.geometry import as_point
from .core.tolerance import DISTANCE_TOLERANCE

T = TypeVar('T')

_NOISE = -1


# ============================================================================
# Private processing functions (work with index neighbourhoods)
# ============================================================================

def _dbscan(
    count: int,
    region_query: Callable[[int], List[int]],
    min_neighbors: int
) -> Tuple[List[List[int]], List[int]]:
    """Internal function: DBSCAN over item indices.

    Args:
        count: Number of items
        region_query: Function returning the neighbourhood of an index
            (including the index itself)
        min_neighbors: Minimum neighbourhood size of a core item

    Returns:
        Tuple of (clusters as sorted index lists, noise indices)
    """
    labels: List[Optional[int]] = [None] * count
    clusters: List[List[int]] = []

    for i in range(count):
        if labels[i] is not None:
            continue

        neighbours = region_query(i)
        if len(neighbours) < min_neighbors:
            labels[i] = _NOISE
            continue

        label = len(clusters)
        labels[i] = label
        members = [i]
        queue = deque(j for j in neighbours if j != i)

        while queue:
            j = queue.popleft()
            if labels[j] == _NOISE:
                # Border item: joins the cluster but does not expand it
                labels[j] = label
                members.append(j)
                continue
            if labels[j] is not None:
                continue

            labels[j] = label
            members.append(j)
            expansion = region_query(j)
            if len(expansion) >= min_neighbors:
                queue.extend(k for k in expansion if labels[k] is None or labels[k] == _NOISE)

        clusters.append(sorted(members))

    noise = [i for i in range(count) if labels[i] == _NOISE]
    return clusters, noise


# ============================================================================
# Public API
# ============================================================================

def cluster(
    items: Sequence[T],
    adjacency: Optional[Callable[[T, T], bool]] = None,
    min_neighbors: int = 1,
    metric: Optional[Callable[[T, T], float]] = None,
    threshold: Optional[float] = None,
    return_noise: bool = False
) -> Union[List[List[T]], Tuple[List[List[T]], List[T]]]:
    """Group items that are mutually reachable under an adjacency predicate.

    Either ``adjacency`` or both ``metric`` and ``threshold`` must be given.

    Args:
        items: Items to cluster
        adjacency: Predicate telling whether two items are neighbours
        min_neighbors: Minimum neighbourhood size (the item itself counts)
            for an item to seed or expand a cluster
        metric: Distance function used with ``threshold``
        threshold: Maximum metric distance between neighbours
        return_noise: Also return the items that joined no cluster

    Returns:
        List of clusters, each a list of items in input order, or a tuple
        ``(clusters, noise)`` if ``return_noise`` is True

    Raises:
        ConfigurationError: If neither a predicate nor a metric/threshold pair is given

    Examples:
        >>> words = ['apple', 'apricot', 'banana', 'blueberry', 'cherry']
        >>> cluster(words, lambda a, b: a[0] == b[0])
        [['apple', 'apricot'], ['banana', 'blueberry'], ['cherry']]
    """
    if adjacency is None:
        if metric is None or threshold is None:
            raise ConfigurationError("cluster() needs an adjacency predicate or a metric and threshold")

        def adjacency(a, b):
            return metric(a, b) <= threshold

    if min_neighbors < 1:
        raise ConfigurationError(f"min_neighbors must be at least 1, got {min_neighbors}")

    items = list(items)

    def region_query(i: int) -> List[int]:
        return [j for j in range(len(items)) if j == i or adjacency(items[i], items[j])]

    clusters, noise = _dbscan(len(items), region_query, min_neighbors)
    grouped = [[items[i] for i in members] for members in clusters]
    if return_noise:
        return grouped, [items[i] for i in noise]
    return grouped


def cluster_point_indices(
    points: Sequence,
    threshold: float,
    min_neighbors: int = 1
) -> Tuple[List[List[int]], List[int]]:
    """Cluster points whose distance is at most ``threshold``, by index.

    A shapely STRtree ``dwithin`` query on the XY projection prunes the
    candidate neighbours before the exact 3D distance test.

    Returns:
        Tuple of (clusters as sorted index lists, noise indices)
    """
    if min_neighbors < 1:
        raise ConfigurationError(f"min_neighbors must be at least 1, got {min_neighbors}")

    pts = [as_point(p) for p in points]
    if not pts:
        return [], []

    tree = STRtree([Point(p[0], p[1]) for p in pts])
    sq_threshold = threshold * threshold

    def region_query(i: int) -> List[int]:
        candidates = tree.query(Point(pts[i][0], pts[i][1]), predicate='dwithin', distance=threshold)
        neighbours = []
        for j in sorted(int(k) for k in candidates):
            diff = pts[i] - pts[j]
            if j == i or float(np.dot(diff, diff)) <= sq_threshold:
                neighbours.append(j)
        return neighbours

    return _dbscan(len(pts), region_query, min_neighbors)


def cluster_points(
    points: Sequence,
    threshold: float,
    min_neighbors: int = 1,
    return_noise: bool = False
) -> Union[List[List[np.ndarray]], Tuple[List[List[np.ndarray]], List[np.ndarray]]]:
    """Cluster points whose distance is at most ``threshold``.

    Examples:
        >>> clusters = cluster_points([(0, 0), (0.05, 0), (10, 10)], threshold=0.1)
        >>> [len(c) for c in clusters]
        [2, 1]
    """
    pts = [as_point(p) for p in points]
    clusters, noise = cluster_point_indices(pts, threshold, min_neighbors)
    grouped = [[pts[i].copy() for i in members] for members in clusters]
    if return_noise:
        return grouped, [pts[i].copy() for i in noise]
    return grouped


def cull_duplicates(points: Sequence, tolerance: float = DISTANCE_TOLERANCE) -> List[np.ndarray]:
    """Replace every group of points within ``tolerance`` by its mean.

    Examples:
        >>> len(cull_duplicates([(0, 0), (0, 1e-9), (1, 1)]))
        2
    """
    return [np.mean(group, axis=0) for group in cluster_points(points, tolerance)]


__all__ = [
    'cluster',
    'cluster_point_indices',
    'cluster_points',
    'cull_duplicates',
]
