"""Data Graph — declarative, dependency-tracked configuration graph for generation forms.

Invariants:
    - All functions are pure: no IO, no async; compute() never mutates its inputs
    - Node keys are unique; merge() is a map union where the RIGHT operand wins and
      the overriding node keeps the base node's position
    - Every dependency names a node of the graph or a declared context key —
      violations raise ConfigError at construction, never during compute()
    - A node is recomputed iff it has no previous config or one of its declared
      dependencies changed (value equality); otherwise the previous NodeConfig
      object is returned as-is
    - Downstream resolvers see each node's caller-supplied value, or its
      default_value when the caller supplied none (computed nodes: always the value)
    - Resolver exceptions propagate unchanged — no partial results

Design Decisions:
    - Explicit dependency lists + context diff instead of closure capture: the
      recompute trigger is visible in the graph definition and testable
    - Graphs are immutable values: node()/merge()/computed() return new graphs, so
      shared fragments (checkpoint graph, common nodes) can be reused safely
    - Undeclared reads are not blocked; strict mode only logs them (resolver
      purity is a caller contract)
"""

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from gencore.core.domain_types import NodeKind
from gencore.core.errors import ConfigError

logger = logging.getLogger(__name__)

_MISSING = object()


@dataclass(frozen=True)
class NodeConfig:
    """Computed configuration for one form field. Recreated on recompute, never mutated."""
    kind: NodeKind = NodeKind.VALUE
    when: bool = True
    default_value: Any = None
    meta: Mapping[str, Any] = field(default_factory=dict)

    def shown(self, when: bool) -> "NodeConfig":
        """Same config with visibility replaced."""
        return replace(self, when=when)

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "when": self.when,
            "default_value": self.default_value,
            "meta": dict(self.meta),
        }


Context = Mapping[str, Any]
Extras = Mapping[str, Any]
Resolver = Callable[[Context, Extras], Any]
GraphResult = dict[str, NodeConfig]


@dataclass(frozen=True)
class NodeDefinition:
    """A named resolver plus the context keys it is allowed to read."""
    key: str
    resolver: Resolver
    deps: tuple[str, ...] = ()
    computed: bool = False


@dataclass(frozen=True)
class _Discriminator:
    """Graph position that splices in one branch graph chosen by a context value."""
    on: str
    branches: Mapping[Any, "DataGraph"]


_Entry = NodeDefinition | _Discriminator


def _constant(config: NodeConfig) -> Resolver:
    def resolve(ctx: Context, ext: Extras) -> NodeConfig:
        return config
    return resolve


def _discriminator_slot(on: str) -> str:
    # Angle brackets cannot collide with node keys used as context keys
    return f"<{on}>"


class DataGraph:
    """Ordered, immutable collection of nodes and discriminators."""

    def __init__(self, context_keys: Iterable[str] = (), *, name: str | None = None):
        self.name = name
        self._context_keys = frozenset(context_keys)
        self._entries: dict[str, _Entry] = {}

    # --- Introspection ---------------------------------------------------------

    @property
    def context_keys(self) -> frozenset[str]:
        """External keys the caller must provide (not produced by this graph)."""
        return self._context_keys

    @property
    def node_keys(self) -> list[str]:
        """Top-level node keys in registration order (branch nodes excluded)."""
        return [k for k, e in self._entries.items() if isinstance(e, NodeDefinition)]

    def all_node_keys(self) -> set[str]:
        """Top-level keys plus every key any discriminator branch can produce."""
        keys = set(self.node_keys)
        for entry in self._entries.values():
            if isinstance(entry, _Discriminator):
                for branch in entry.branches.values():
                    keys |= branch.all_node_keys()
        return keys

    def definition(self, key: str) -> NodeDefinition:
        entry = self._entries.get(key)
        if not isinstance(entry, NodeDefinition):
            raise KeyError(key)
        return entry

    def dependencies(self, key: str) -> tuple[str, ...]:
        return self.definition(key).deps

    def __contains__(self, key: object) -> bool:
        return isinstance(self._entries.get(key), NodeDefinition)  # type: ignore[arg-type]

    def __len__(self) -> int:
        return len(self.node_keys)

    def __iter__(self) -> Iterator[str]:
        return iter(self.node_keys)

    def __repr__(self) -> str:
        return f"DataGraph(name={self.name!r}, nodes={self.node_keys})"

    # --- Construction ------------------------------------------------------------

    def node(
        self,
        key: str,
        resolver_or_config: Resolver | NodeConfig,
        deps: Iterable[str] | None = None,
    ) -> "DataGraph":
        """Add (or override) a node. A static NodeConfig never recomputes."""
        if isinstance(resolver_or_config, NodeConfig):
            definition = NodeDefinition(key, _constant(resolver_or_config), ())
        else:
            definition = NodeDefinition(key, resolver_or_config, tuple(deps or ()))
        return self._derive({**self._entries, key: definition}, self._context_keys)

    def computed(
        self, key: str, fn: Resolver, deps: Iterable[str],
    ) -> "DataGraph":
        """Add a derived context value, visible to downstream nodes but never rendered."""
        definition = NodeDefinition(key, fn, tuple(deps), computed=True)
        return self._derive({**self._entries, key: definition}, self._context_keys)

    def discriminator(
        self, on: str, branches: Mapping[Any, "DataGraph"],
    ) -> "DataGraph":
        """Splice in the branch graph selected by the value of `on`."""
        entry = _Discriminator(on, MappingProxyType(dict(branches)))
        slot = _discriminator_slot(on)
        return self._derive({**self._entries, slot: entry}, self._context_keys)

    def grouped_discriminator(
        self, on: str, groups: Iterable[tuple[Iterable[Any], "DataGraph"]],
    ) -> "DataGraph":
        """Discriminator where several values share one branch graph."""
        branches = {value: graph for values, graph in groups for value in values}
        return self.discriminator(on, branches)

    def merge(self, other: "DataGraph") -> "DataGraph":
        """Union of both graphs; `other` wins on key collisions."""
        merged = self._derive(
            {**self._entries, **other._entries},
            self._context_keys | other._context_keys,
        )
        merged.name = self.name or other.name
        return merged

    def _derive(
        self, entries: dict[str, _Entry], context_keys: frozenset[str],
    ) -> "DataGraph":
        _validate(entries, context_keys)
        graph = DataGraph(context_keys, name=self.name)
        graph._entries = entries
        return graph

    # --- Compute -----------------------------------------------------------------

    def compute(
        self,
        context: Context,
        extras: Extras | None = None,
        previous_context: Context | None = None,
        previous_result: Mapping[str, NodeConfig] | None = None,
        *,
        previous_extras: Extras | None = None,
        strict: bool = False,
    ) -> GraphResult:
        """Resolve every node against `context`, reusing unaffected previous configs.

        Without both previous_context and previous_result every node is resolved.
        Extras are not dependency-tracked: pass previous_extras and any difference
        from `extras` forces a full recompute; omitted, extras count as unchanged.
        Returns node key -> NodeConfig in registration order.
        """
        full = (
            previous_context is None
            or previous_result is None
            or (previous_extras is not None and dict(previous_extras) != dict(extras or {}))
        )
        changed = set() if full else changed_keys(context, previous_context)
        previous = {} if full else previous_result
        working = dict(context)
        result: GraphResult = {}
        stats = {"recomputed": 0, "reused": 0}
        self._compute_into(
            context, result, working, extras or {}, changed, previous, strict, stats,
        )
        logger.debug(
            f"Graph {self.name or '<anonymous>'} computed: "
            f"{stats['recomputed']} recomputed, {stats['reused']} reused",
        )
        return result

    def _compute_into(
        self,
        context: Context,
        result: GraphResult,
        working: dict[str, Any],
        extras: Extras,
        changed: set[str],
        previous: Mapping[str, NodeConfig],
        strict: bool,
        stats: dict[str, int],
    ) -> None:
        for entry in self._entries.values():
            if isinstance(entry, _Discriminator):
                branch = entry.branches.get(working.get(entry.on))
                if branch is None:
                    continue
                # Switching branch invalidates every branch node
                branch_previous = {} if entry.on in changed else previous
                branch._compute_into(
                    context, result, working, extras, changed, branch_previous, strict, stats,
                )
                continue

            # Computed values and absent form values fall back to the node default
            uses_default = entry.computed or entry.key not in context
            prev = previous.get(entry.key)
            if prev is not None and changed.isdisjoint(entry.deps):
                config = prev
                stats["reused"] += 1
            else:
                config = _resolve(entry, working, extras, strict)
                stats["recomputed"] += 1
                if uses_default and (
                    prev is None or prev.default_value != config.default_value
                ):
                    changed.add(entry.key)

            if uses_default:
                working[entry.key] = config.default_value
            result[entry.key] = config


# --- Module-level API ------------------------------------------------------------

def build_graph(
    definitions: Iterable[NodeDefinition],
    context_keys: Iterable[str] = (),
    *,
    name: str | None = None,
) -> DataGraph:
    """Build a graph from definitions. Duplicate keys: last definition wins."""
    entries: dict[str, _Entry] = {}
    for definition in definitions:
        entries[definition.key] = definition
    return DataGraph(context_keys, name=name)._derive(entries, frozenset(context_keys))


def changed_keys(context: Context, previous_context: Context) -> set[str]:
    """Keys whose value differs (by equality) between two context snapshots."""
    return {
        key
        for key in set(context) | set(previous_context)
        if context.get(key, _MISSING) != previous_context.get(key, _MISSING)
    }


def visible_nodes(result: Mapping[str, NodeConfig]) -> list[str]:
    """Keys of rendered nodes (when=True, computed values excluded), in order."""
    return [
        key for key, config in result.items()
        if config.when and config.kind != NodeKind.COMPUTED
    ]


def default_values(result: Mapping[str, NodeConfig]) -> dict[str, Any]:
    """Initial form values for every visible node."""
    return {key: result[key].default_value for key in visible_nodes(result)}


# --- Private helpers ---------------------------------------------------------------

class _TrackingContext(Mapping):
    """Read-only view that records every key a resolver looks up."""

    def __init__(self, data: Mapping[str, Any]):
        self._data = data
        self.reads: set[str] = set()

    def __getitem__(self, key: str) -> Any:
        self.reads.add(key)
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)


def _resolve(
    entry: NodeDefinition, working: dict[str, Any], extras: Extras, strict: bool,
) -> NodeConfig:
    ctx: Mapping[str, Any] = (
        _TrackingContext(working) if strict else MappingProxyType(working)
    )
    output = entry.resolver(ctx, extras)
    if strict:
        undeclared = ctx.reads - set(entry.deps)  # type: ignore[attr-defined]
        if undeclared:
            logger.warning(
                f"Node '{entry.key}' read undeclared context keys: {sorted(undeclared)}",
                extra={"node_key": entry.key},
            )
    if entry.computed:
        return NodeConfig(kind=NodeKind.COMPUTED, when=False, default_value=output)
    if not isinstance(output, NodeConfig):
        raise TypeError(
            f"Resolver for node '{entry.key}' returned {type(output).__name__}, "
            f"expected NodeConfig",
        )
    return output


def _validate(entries: Mapping[str, _Entry], context_keys: frozenset[str]) -> None:
    """Check dependency references. Raises ConfigError on the first violation."""
    top_keys = {k for k, e in entries.items() if isinstance(e, NodeDefinition)}
    branch_keys: set[str] = set()
    for entry in entries.values():
        if isinstance(entry, _Discriminator):
            for branch in entry.branches.values():
                branch_keys |= branch.all_node_keys()

    clash = sorted(top_keys & branch_keys)
    if clash:
        raise ConfigError(
            f"Node '{clash[0]}' is defined both in the graph and in a discriminator branch",
            node_key=clash[0],
        )

    # Branch nodes exist only while their branch is selected
    known = context_keys | top_keys
    computed_keys = {
        k for k, e in entries.items() if isinstance(e, NodeDefinition) and e.computed
    }
    upstream_computed: set[str] = set()

    for key, entry in entries.items():
        if isinstance(entry, _Discriminator):
            _validate_discriminator(entry, context_keys | top_keys, computed_keys, upstream_computed)
            continue
        for dep in entry.deps:
            if dep == key:
                raise ConfigError(f"Node '{key}' depends on itself", node_key=key)
            if dep in branch_keys:
                raise ConfigError(
                    f"Node '{key}' depends on '{dep}', which only exists inside a "
                    f"discriminator branch",
                    node_key=key,
                )
            if dep not in known:
                raise ConfigError(
                    f"Node '{key}' depends on unknown key '{dep}'", node_key=key,
                )
            if dep in computed_keys and dep not in upstream_computed:
                raise ConfigError(
                    f"Node '{key}' depends on computed node '{dep}' registered after it",
                    node_key=key,
                )
        if entry.computed:
            upstream_computed.add(key)


def _validate_discriminator(
    entry: _Discriminator,
    available: frozenset[str] | set[str],
    computed_keys: set[str],
    upstream_computed: set[str],
) -> None:
    if entry.on not in available:
        raise ConfigError(
            f"Discriminator key '{entry.on}' is not a context key or node", node_key=entry.on,
        )
    if entry.on in computed_keys and entry.on not in upstream_computed:
        raise ConfigError(
            f"Discriminator key '{entry.on}' is computed after the discriminator",
            node_key=entry.on,
        )
    for value, branch in entry.branches.items():
        missing = sorted(branch.context_keys - set(available))
        if missing:
            raise ConfigError(
                f"Branch '{value}' of discriminator '{entry.on}' needs "
                f"unavailable context keys: {missing}",
                node_key=entry.on,
            )
