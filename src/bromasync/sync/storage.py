# Copyright 2026 bromasync Contributors
# SPDX-License-Identifier: Apache-2.0

"""Explicit parameter storage for membercall and optcall functions.

The program database cannot infer where these conventions place float and
structure-by-value arguments, so their storage is assigned by hand:

* the first five parameters, if floating-point, go to ``XMM<i>``;
* parameter 0 goes to ``ECX``;
* for optcall, a non-structure parameter 1 goes to ``EDX``;
* everything else goes to the stack.

Stack offsets advance by the size of the parameter at the same index of a
copy of the list in which structures by value are moved to the end. This
does not always equal the size of the parameter just placed.
"""

from __future__ import annotations

import dataclasses

from bromasync.database.entities import Parameter, RegisterStorage, SourceType, StackStorage, Storage
from bromasync.database.types import DataType, is_float_scalar, is_struct_by_value, is_undefined
from bromasync.sync.conventions import CallingConvention
from bromasync.sync.report import SyncError, SyncWarning

# ###############
# Public Interface
# ###############

# Number of leading parameters that may be passed in float registers.
FLOAT_REGISTER_COUNT = 5

FIRST_GP_REGISTER = "ECX"
SECOND_GP_REGISTER = "EDX"


def needs_custom_storage(convention: CallingConvention | None, params: list[Parameter]) -> bool:
    """Return True if *params* must be placed explicitly under *convention*."""
    if convention is None or not convention.needs_explicit_storage:
        return False
    return any(is_struct_by_value(p.data_type) or is_float_scalar(p.data_type) for p in params)


def float_register(index: int, data_type: DataType, location: str) -> str:
    """Return the float register of argument *index* for a float of *data_type*.

    Raises:
        SyncError: If the float width has no register alias.
    """
    if data_type.length == 4:
        return f"XMM{index}_Da"
    if data_type.length == 8:
        return f"XMM{index}_Qa"
    raise SyncError(
        f"Parameter {index} of {location} has type {data_type}, which is floating-point "
        "but has no known register location"
    )


def allocate_storage(
    convention: CallingConvention,
    params: list[Parameter],
    location: str,
    warnings: list[SyncWarning],
) -> list[Parameter]:
    """Assign register or stack storage to every parameter.

    Args:
        convention: The resolved calling convention.
        params: Parameters in call order, including ``this`` and ``ret``.
        location: Qualified function name used in messages.
        warnings: Receives a warning for every stack parameter of unknown size.

    Returns:
        Copies of *params* with storage set and source marked as analysis.

    Raises:
        SyncError: If a float parameter has an unsupported width.
    """
    reordered = sorted(params, key=lambda p: is_struct_by_value(p.data_type))
    result: list[Parameter] = []
    stack_offset = 0
    for i, param in enumerate(params):
        data_type = param.data_type
        storage: Storage
        if i < FLOAT_REGISTER_COUNT and is_float_scalar(data_type):
            storage = RegisterStorage(float_register(i, data_type, location))
        elif i == 0:
            storage = RegisterStorage(FIRST_GP_REGISTER)
        elif convention == CallingConvention.OPTCALL and i == 1 and not is_struct_by_value(data_type):
            storage = RegisterStorage(SECOND_GP_REGISTER)
        else:
            if is_undefined(data_type):
                warnings.append(
                    SyncWarning(
                        f"Function {location} has parameter {param.name} of an undefined struct type "
                        "- its stack offsets need to be fixed manually"
                    )
                )
            storage = StackStorage(stack_offset, data_type.length)
            stack_offset += reordered[i].data_type.length
        result.append(dataclasses.replace(param, storage=storage, source=SourceType.ANALYSIS))
    return result
