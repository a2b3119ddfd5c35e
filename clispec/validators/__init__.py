__all__ = [
    "AllOf",
    "Components",
    "EachElement",
    "Validator",
    "all_of",
    "from_option",
    "from_positional",
    "must_exist_dir",
    "must_exist_file",
    "must_exist_for_type",
    "must_exist_path",
    "required",
]

from clispec.validators._core import AllOf, Validator, all_of, required
from clispec.validators._path import (
    Components,
    EachElement,
    must_exist_dir,
    must_exist_file,
    must_exist_for_type,
    must_exist_path,
)
from clispec.validators._factory import from_option, from_positional
