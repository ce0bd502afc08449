"""Bi-directional dependency graph built from frontmatter references."""

from dataclasses import dataclass, field

from promptkit.core.component_def import ComponentDef, ComponentKind


@dataclass
class GraphNode:
    """One component plus its forward and reverse references."""

    kind: ComponentKind
    id: str
    description: str
    depends_on: dict[str, list[str]] = field(default_factory=dict)
    used_by: dict[str, list[str]] = field(default_factory=dict)
    dangling: list[tuple[str, str]] = field(default_factory=list)


@dataclass
class GraphStats:
    counts: dict[str, int]
    skill_refs: int
    command_refs: int
    agent_refs: int


@dataclass
class DependencyGraph:
    nodes: dict[tuple[str, str], GraphNode] = field(default_factory=dict)

    def get(self, kind: str, def_id: str) -> GraphNode | None:
        return self.nodes.get((kind, def_id))

    def find(self, def_id: str) -> list[GraphNode]:
        """All nodes with this id, across kinds."""
        return [node for (_, node_id), node in self.nodes.items() if node_id == def_id]

    def of_kind(self, kind: str) -> list[GraphNode]:
        return [node for (node_kind, _), node in self.nodes.items() if node_kind == kind]

    def dangling(self) -> list[tuple[GraphNode, str, str]]:
        """(source node, target kind, target id) for every unresolved reference."""
        return [
            (node, kind, target)
            for node in self.nodes.values()
            for kind, target in node.dangling
        ]

    def stats(self) -> GraphStats:
        counts: dict[str, int] = {}
        refs = {"skill": 0, "command": 0, "agent": 0}
        for node in self.nodes.values():
            counts[node.kind] = counts.get(node.kind, 0) + 1
            if node.kind in ("agent", "workflow"):
                for kind in refs:
                    refs[kind] += len(node.depends_on.get(kind, []))
        return GraphStats(
            counts=counts,
            skill_refs=refs["skill"],
            command_refs=refs["command"],
            agent_refs=refs["agent"],
        )


def build_dependency_graph(
    components: dict[ComponentKind, list[ComponentDef]],
) -> DependencyGraph:
    """
    Build the graph from discovered components.

    Forward edges come from each component's references(); reverse edges are
    added only for targets that exist. Unknown targets are kept as dangling.
    """
    graph = DependencyGraph()
    for kind, items in components.items():
        for component in items:
            graph.nodes[(kind, component.id)] = GraphNode(
                kind=kind,
                id=component.id,
                description=component.description,
                depends_on={
                    target_kind: list(targets)
                    for target_kind, targets in component.references().items()
                    if targets
                },
            )

    for node in graph.nodes.values():
        for target_kind, targets in node.depends_on.items():
            for target_id in targets:
                target = graph.get(target_kind, target_id)
                if target is None:
                    node.dangling.append((target_kind, target_id))
                    continue
                users = target.used_by.setdefault(node.kind, [])
                if node.id not in users:
                    users.append(node.id)

    return graph
