"""Model, knowledge-driven engine, dan orchestrator diagnosis."""
