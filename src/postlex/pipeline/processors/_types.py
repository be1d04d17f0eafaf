"""
Processor result type shared by all processors.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class ProcessorResult:
    """
    Return value of processor.run().

    - outputs: artifact keys written by the processor (usually empty; the
      caller owns file IO)
    - data: in-memory results handed to the caller
    - metrics: counters for logs and reports
    - warnings: non-fatal issues worth surfacing
    """
    outputs: List[str] = field(default_factory=list)
    data: Dict[str, Any] = field(default_factory=dict)
    metrics: Dict[str, Any] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
