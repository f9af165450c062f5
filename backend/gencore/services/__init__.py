"""Services Layer — template engine, review messages, ecosystem graph definitions.

Invariants:
    - One define_*_graph.py per ecosystem family; graphs registered explicitly
    - Services call into core/ with plain data and return plain data

Design Decisions:
    - Graph definitions are configuration tables plus small branch rules; all
      recomputation semantics stay in core/data_graph.py
"""
