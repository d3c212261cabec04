from __future__ import annotations
import json
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List

from ..ir.model_ir import Argument, Model


def _describe_arguments(args: List[Argument]) -> List[Dict[str, Any]]:
    described = []
    for arg in args:
        for v in arg.value:
            described.append({"name": v.name, "type": str(v.type) if v.type is not None else None})
    return described


def _weight_stats(model: Model) -> Dict[str, int]:
    """Counts initializer tensors, their elements and bytes."""
    tensors = 0
    parameters = 0
    nbytes = 0
    for g in model.modules:
        for n in g.nodes:
            for arg in n.inputs:
                for v in arg.value:
                    t = v.initializer
                    if t is None:
                        continue
                    count = t.num_elements
                    tensors += 1
                    parameters += count
                    itemsize = t.type.itemsize if t.type is not None else None
                    nbytes += count * (itemsize or 0)
    return {"tensors": tensors, "parameters": parameters, "bytes": nbytes}


def generate_summary(model: Model) -> Dict[str, Any]:
    """Generates a JSON-compatible summary of a loaded model."""
    op_histogram: Counter = Counter()
    node_count = 0
    inputs: List[Dict[str, Any]] = []
    outputs: List[Dict[str, Any]] = []
    for g in model.modules:
        node_count += len(g.nodes)
        op_histogram.update(n.type.name for n in g.nodes)
        inputs.extend(_describe_arguments(g.inputs))
        outputs.extend(_describe_arguments(g.outputs))

    return {
        "format": model.format,
        "producer": model.producer,
        "name": model.name,
        "description": model.description,
        "graphs": len(model.modules),
        "nodes": node_count,
        "ops": dict(sorted(op_histogram.items(), key=lambda kv: (-kv[1], kv[0]))),
        "inputs": inputs,
        "outputs": outputs,
        "weights": _weight_stats(model),
    }


def format_summary(summary: Dict[str, Any]) -> str:
    lines = [f"Format:   {summary['format']}"]
    for key in ("producer", "name", "description"):
        if summary.get(key):
            lines.append(f"{key.capitalize() + ':':<10}{summary[key]}")
    lines.append(f"Graphs:   {summary['graphs']}")
    lines.append(f"Nodes:    {summary['nodes']}")

    for title, key in (("Inputs", "inputs"), ("Outputs", "outputs")):
        if summary[key]:
            lines.append(f"\n{title}:")
            for item in summary[key]:
                lines.append(f"  {item['name']:<20} {item['type'] or '?'}")

    if summary["ops"]:
        lines.append("\nOperators:")
        for op, count in summary["ops"].items():
            lines.append(f"  {op:<20} {count}")

    weights = summary["weights"]
    if weights["tensors"]:
        lines.append(f"\nWeights: {weights['tensors']} tensors, "
                     f"{weights['parameters']} parameters, {weights['bytes']} bytes")
    return "\n".join(lines)


def write_report(model: Model, path: str) -> Dict[str, Any]:
    """Writes the summary plus the full model dump as JSON."""
    report = generate_summary(model)
    report["model"] = model.to_dict()
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    with open(output, "w") as f:
        json.dump(report, f, indent=4, default=str)
    return report
