"""Waygen protocol binding generator."""

from .bindings import BindingBuilder as BindingBuilder
from .bindings import InterfaceBinding as InterfaceBinding
from .bindings import build_protocol as build_protocol
from .config import GeneratorConfig as GeneratorConfig
from .config import Role as Role
from .errors import *
from .parser import parse as parse
from .source import read_source as read_source
from .symbols import SymbolTable as SymbolTable
from .types import *
