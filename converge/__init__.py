"""Idempotent convergence primitives.

Each resource checks the current state of the host before acting, so any
sequence of them can be run again and again.
"""

from converge.accounts import Group, User
from converge.base import Resource
from converge.execute import Execute
from converge.files import Directory, File, Link
from converge.git import Git
from converge.host import LocalHost
from converge.package import Package
from converge.rbenv import RbenvGem, RbenvRuby
from converge.results import ConvergeResult
from converge.runit import RunitService
from converge.runner import ConvergeRunner

__all__ = [
    "ConvergeResult",
    "ConvergeRunner",
    "Directory",
    "Execute",
    "File",
    "Git",
    "Group",
    "Link",
    "LocalHost",
    "Package",
    "RbenvGem",
    "RbenvRuby",
    "Resource",
    "RunitService",
    "User",
]
