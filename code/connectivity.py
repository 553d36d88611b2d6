"""Graph views of a generated level, backed by networkx."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Set

import networkx as nx

from dungeon_geometry import Rect, TilePos
from dungeon_models import Corridor, Room
from tile_grid import TileGrid


def build_floor_graph(grid: TileGrid, within: Optional[Rect] = None) -> nx.Graph:
    """4-connected graph over passable tiles (floor and doors), optionally clipped to ``within``."""
    graph = nx.Graph()
    if within is None:
        passable = [pos for pos, kind in grid.items() if kind.passable]
    else:
        passable = [pos for pos in within.tiles() if grid.is_passable(pos)]
    graph.add_nodes_from(passable)
    for pos in passable:
        for neighbor in (pos.offset(1, 0), pos.offset(0, 1)):
            if within is not None and not within.contains(neighbor):
                continue
            if grid.is_passable(neighbor):
                graph.add_edge(pos, neighbor)
    return graph


def reachable_cells(grid: TileGrid, start: TilePos, within: Optional[Rect] = None) -> Set[TilePos]:
    """Passable tiles 4-connected to ``start``; empty when ``start`` is not passable."""
    graph = build_floor_graph(grid, within)
    if start not in graph:
        return set()
    return set(nx.node_connected_component(graph, start))


def room_components(grid: TileGrid, rooms: Sequence[Room]) -> List[Set[int]]:
    """Group room indices by the passable region they share.

    A room whose rectangle holds no passable tile forms its own group.
    """
    graph = build_floor_graph(grid)
    component_of: Dict[TilePos, int] = {}
    for component_id, nodes in enumerate(nx.connected_components(graph)):
        for node in nodes:
            component_of[node] = component_id

    groups: Dict[int, Set[int]] = {}
    isolated: List[Set[int]] = []
    for room in rooms:
        component_id = next(
            (component_of[pos] for pos in room.cells() if pos in component_of),
            None,
        )
        if component_id is None:
            isolated.append({room.index})
            continue
        groups.setdefault(component_id, set()).add(room.index)
    return sorted(groups.values(), key=min) + isolated


def rooms_connected(grid: TileGrid, rooms: Sequence[Room]) -> bool:
    """True when every room can reach every other room over passable tiles."""
    if len(rooms) <= 1:
        return True
    return len(room_components(grid, rooms)) == 1


def build_room_graph(rooms: Sequence[Room], corridors: Sequence[Corridor]) -> nx.Graph:
    """Rooms as nodes, one edge per corridor."""
    graph = nx.Graph()
    for room in rooms:
        graph.add_node(room.index)
    for corridor in corridors:
        graph.add_edge(corridor.room_a_index, corridor.room_b_index)
    return graph


def room_graph_diameter(graph: nx.Graph) -> int:
    """Diameter of the largest component, 0 for graphs with fewer than two rooms."""
    if graph.number_of_nodes() < 2:
        return 0
    largest = max(nx.connected_components(graph), key=len)
    if len(largest) < 2:
        return 0
    return int(nx.diameter(graph.subgraph(largest)))


def room_graph_cycle_count(graph: nx.Graph) -> int:
    """Number of independent loops; a pure BSP join yields a tree, so 0."""
    return graph.number_of_edges() - graph.number_of_nodes() + nx.number_connected_components(graph)
