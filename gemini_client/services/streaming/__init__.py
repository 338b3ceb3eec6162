"""
Streaming pipeline package.
"""

from .assembler import (
    StreamAggregate,
    StreamAssembler,
    StreamFragment,
    ToolCall,
    ToolCallFragment,
    assemble,
)
from .delta import fragment_from_chunk
from .processor import ResponseStream, parse_sse_line

__all__ = [
    "StreamAggregate",
    "StreamAssembler",
    "StreamFragment",
    "ToolCall",
    "ToolCallFragment",
    "assemble",
    "fragment_from_chunk",
    "ResponseStream",
    "parse_sse_line",
]
