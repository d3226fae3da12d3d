from .errors import BuildError
from .executor import Executor
from .vasm import VASMCompiler
from .vlink import VLINKLinker
