"""Weighted directed graph with early-stopping shortest-path search."""

from __future__ import annotations

import heapq
from collections.abc import Iterable, Sequence
from pathlib import Path


class DirectedGraph:
    """A directed graph over vertices ``0..n-1`` with non-negative integer weights.

    The vertex count is one more than the largest vertex named by an edge.
    """

    def __init__(self, edges: Iterable[tuple[int, int]], weights: Iterable[int]) -> None:
        edges = [(int(u), int(v)) for u, v in edges]
        weights = [int(w) for w in weights]
        if len(edges) != len(weights):
            raise ValueError("every edge needs exactly one weight")
        for u, v in edges:
            if u < 0 or v < 0:
                raise ValueError(f"negative vertex index in edge ({u}, {v})")
        if any(w < 0 for w in weights):
            raise ValueError("negative edge weight")

        self._num_vertices = max((max(u, v) for u, v in edges), default=-1) + 1
        self._adjacency: list[list[tuple[int, int]]] = [[] for _ in range(self._num_vertices)]
        for (u, v), w in zip(edges, weights):
            self._adjacency[u].append((v, w))
        self._predecessors: list[int | None] = [None] * self._num_vertices

    @property
    def num_vertices(self) -> int:
        return self._num_vertices

    def edges(self) -> list[tuple[int, int, int]]:
        """All edges as ``(source, target, weight)``, grouped by source vertex."""
        return [(u, v, w) for u, out in enumerate(self._adjacency) for v, w in out]

    def _check_vertex(self, v: int) -> None:
        if not 0 <= v < self._num_vertices:
            raise IndexError(f"vertex {v} is not in the graph")

    def find_shortest_path(self, start: int, end: int) -> list[int] | None:
        """Vertices of a cheapest path from ``start`` to ``end``, or None if unreachable.

        The search stops as soon as ``end`` is settled.
        """
        self._check_vertex(start)
        self._check_vertex(end)

        dist: dict[int, int] = {start: 0}
        pred: list[int | None] = [None] * self._num_vertices
        pred[start] = start
        settled: set[int] = set()
        heap = [(0, start)]
        found = False

        while heap:
            d, u = heapq.heappop(heap)
            if u in settled:
                continue
            settled.add(u)
            if u == end:
                found = True
                break
            for v, w in self._adjacency[u]:
                nd = d + w
                if v not in settled and nd < dist.get(v, nd + 1):
                    dist[v] = nd
                    pred[v] = u
                    heapq.heappush(heap, (nd, v))

        self._predecessors = pred
        if not found:
            return None

        path = [end]
        current = end
        while current != start and pred[current] is not None and pred[current] != current:
            current = pred[current]
            path.append(current)
        path.reverse()
        return path

    def save_dot(self, path: str | Path, node_names: Sequence[str]) -> None:
        """Write the graph in DOT format, naming vertex ``i`` by ``node_names[i]``.

        Edges of the last search's shortest-path tree are black, others grey.
        """
        if len(node_names) < self._num_vertices:
            raise ValueError("node names are fewer than the graph vertices")

        lines = [
            "digraph D {",
            "  rankdir=LR",
            '  size="4,3"',
            '  ratio="fill"',
            '  edge[style="bold"]',
            '  node[shape="circle"]',
        ]
        for u, v, w in self.edges():
            color = "black" if self._predecessors[v] == u and u != v else "grey"
            lines.append(f'  {node_names[u]} -> {node_names[v]}[label="{w}", color="{color}"]')
        lines.append("}")
        Path(path).write_text("\n".join(lines) + "\n", encoding="utf-8")