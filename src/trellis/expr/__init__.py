"""The template expression language: tokenizer, parser and closure compiler."""

# Builtins
from trellis.expr.builtins import BUILTINS as BUILTINS

# Compiler
from trellis.expr.compiler import Resolver as Resolver
from trellis.expr.compiler import compile_tokens as compile_tokens
from trellis.expr.compiler import is_method as is_method
from trellis.expr.compiler import method as method
from trellis.expr.compiler import source_text as source_text

# Parser
from trellis.expr.parser import TokenStack as TokenStack
from trellis.expr.parser import parse as parse

# Scopes
from trellis.expr.scope import MISSING as MISSING
from trellis.expr.scope import ContextStack as ContextStack
from trellis.expr.scope import has_own as has_own
from trellis.expr.scope import lookup as lookup
from trellis.expr.scope import member as member

# Template strings
from trellis.expr.template import compile as compile
from trellis.expr.template import compile_expression as compile_expression
from trellis.expr.template import constant as constant

# Tokenizer
from trellis.expr.tokenizer import tokenize as tokenize
