from __future__ import annotations

from dataclasses import dataclass

from lark import Lark, ParseTree, Token, Transformer, v_args
from lark.exceptions import UnexpectedInput

from cephcmd.descriptor.grammar import DESCRIPTOR_GRAMMAR
from cephcmd.errors import DescriptorError


@dataclass(frozen=True, slots=True)
class Pair:
    key: str
    value: str
    start: int  # offsets into the descriptor token
    end: int


class _PairTransformer(Transformer[Token, list[Pair]]):
    def start(self, pairs: list[Pair]) -> list[Pair]:
        return pairs

    @v_args(inline=True)
    def pair(self, key: Token, value: Token | None = None) -> Pair:
        if value is None:
            # span covers the dangling "="
            return Pair(str(key), "", key.start_pos, key.start_pos + len(key) + 1)
        return Pair(str(key), str(value), key.start_pos, value.start_pos + len(value))


_PARSER = Lark(
    DESCRIPTOR_GRAMMAR,
    start="start",
    parser="lalr",
    lexer="contextual",
    cache=False,
)


def tokenize_descriptor(token: str) -> list[Pair]:
    """
    Split one parameter descriptor (`name=x,type=T,range=0|5,req=false`) into its
    `key=value` pairs, in source order. Raises DescriptorError on malformed text.
    """
    try:
        tree: ParseTree = _PARSER.parse(token)
    except UnexpectedInput as e:
        pos = getattr(e, "pos_in_stream", None)
        if pos is None or pos < 0:
            raise DescriptorError("malformed parameter descriptor") from e
        raise DescriptorError(
            f"malformed parameter descriptor near column {pos + 1}", pos, pos + 1
        ) from e
    return _PairTransformer().transform(tree)
