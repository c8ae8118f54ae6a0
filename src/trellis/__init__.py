"""Declarative templates, a small expression language and frame-batched updates."""

# Components
from trellis.component import Component as Component

# Errors
from trellis.errors import Errors as Errors
from trellis.errors import EvaluationError as EvaluationError
from trellis.errors import ExpressionSyntaxError as ExpressionSyntaxError
from trellis.errors import LexicalError as LexicalError
from trellis.errors import TemplateError as TemplateError
from trellis.errors import TrellisError as TrellisError

# Expression language
from trellis.expr import compile as compile
from trellis.expr import compile_tokens as compile_tokens
from trellis.expr import method as method
from trellis.expr import parse as parse
from trellis.expr import tokenize as tokenize

# Hosting
from trellis.host import ViewHost as ViewHost

# Scheduling
from trellis.scheduling import ImmediateFrameSource as ImmediateFrameSource
from trellis.scheduling import LoopFrameSource as LoopFrameSource
from trellis.scheduling import Scheduler as Scheduler
from trellis.scheduling import cancel_update as cancel_update
from trellis.scheduling import request_update as request_update

# Tags
from trellis.tags import TagDescriptor as TagDescriptor
from trellis.tags import parse_tag as parse_tag

# Views
from trellis.view import ComponentFactory as ComponentFactory
from trellis.view import StaleItemsWarning as StaleItemsWarning
from trellis.view import View as View
