from __future__ import annotations


class GraphCompilationError(Exception):
    def __init__(self, diagnostics: list[str]):
        self.diagnostics = diagnostics
        super().__init__(diagnostics[0] if diagnostics else "Block graph compilation failed")


class GenerationError(GraphCompilationError):
    pass


class CycleError(GenerationError):
    def __init__(self, instance_id: str):
        self.instance_id = instance_id
        super().__init__([f"Circular dependency detected involving block {instance_id}"])
