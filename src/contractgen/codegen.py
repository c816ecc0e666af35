# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Render the Go export glue for a validated contract."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from contractgen.amount import to_yocto
from contractgen.config import GeneratorConfig
from contractgen.model import FileRecord, MethodRecord, Param, StateRecord
from contractgen.naming import capitalize_first, is_basic_type, to_snake_case

logger = logging.getLogger(__name__)

HEADER = (
    "// Code generated by NEAR contract generator. DO NOT EDIT.\n"
    "// This file uses encoding/json for both state serialization and parameter parsing.\n"
)
PROMISE_RESULT_TYPE = "promise.PromiseResult"
RAW_BYTES_TYPE = "[]byte"

# Argument expression for each promise-result parameter shape.
_PROMISE_ARGUMENTS: dict[str, str] = {
    PROMISE_RESULT_TYPE: "*promRes",
    f"*{PROMISE_RESULT_TYPE}": "promRes",
    f"[]{PROMISE_RESULT_TYPE}": "promRes",
}


@dataclass(frozen=True)
class _ReturnShape:
    data_count: int
    returns_error: bool


def render_contract(
    methods: Sequence[MethodRecord],
    state: StateRecord,
    files: Sequence[FileRecord],
    config: GeneratorConfig | None = None,
) -> str:
    """Render the complete generated Go source file.

    Args:
        methods: Validated annotated methods.
        state: The single state struct.
        files: Extracted files, in scan order, for passthrough emission.
        config: Generator configuration; defaults apply when omitted.

    Returns:
        Generated Go source text.
    """
    config = config or GeneratorConfig()
    parts = [HEADER, "\n", f"package {config.entry_package}\n\n"]
    parts.append(render_imports(methods, files, config))

    for file_record in files:
        parts.append(f"// ===== From: {file_record.relative_path} =====\n")
        for declaration in file_record.declarations:
            parts.append(declaration)
            parts.append("\n\n")

    parts.append(render_default_init(state))
    parts.append("\n")
    parts.append(render_get_state(state))
    parts.append("\n")
    parts.append(render_set_state(state))
    parts.append("\n")

    parts.append("// ===== Generated Exports =====\n")
    for method in methods:
        if not method.is_exported:
            continue
        parts.append(render_export(method))
        parts.append("\n")

    parts.append("// ===== Helper Functions =====\n")
    parts.append(render_validate_payment())
    return "".join(parts)


def required_imports(config: GeneratorConfig, with_promise: bool) -> set[str]:
    """Return the SDK imports every generated file needs."""
    imports = {
        f'contractBuilder "{config.sdk_module}/contract"',
        f'"{config.sdk_module}/env"',
        f'"{config.sdk_module}/types"',
        'encodingJson "encoding/json"',
    }
    if with_promise:
        imports.add(f'"{config.sdk_module}/promise"')
    return imports


def render_imports(
    methods: Sequence[MethodRecord],
    files: Sequence[FileRecord],
    config: GeneratorConfig,
) -> str:
    """Render the merged, de-duplicated and sorted import block."""
    with_promise = any(method.is_promise_callback for method in methods)
    imports = required_imports(config, with_promise)
    for file_record in files:
        imports.update(spec.strip() for spec in file_record.imports if spec.strip())
    lines = ["import ("]
    lines.extend(f"\t{spec}" for spec in sorted(imports))
    lines.append(")")
    return "\n".join(lines) + "\n\n"


def render_default_init(state: StateRecord) -> str:
    return f"func defaultInit() *{state.name} {{\n\treturn &{state.name}{{}}\n}}\n"


def render_get_state(state: StateRecord) -> str:
    return (
        f"func getState() *{state.name} {{\n"
        "\tval, err := env.StateRead()\n"
        "\tif err != nil || len(val) == 0 {\n"
        "\t\treturn defaultInit()\n"
        "\t}\n"
        f"\tvar state {state.name}\n"
        "\terr = encodingJson.Unmarshal(val, &state)\n"
        "\tif err != nil {\n"
        '\t\tenv.PanicStr("Failed to deserialize state")\n'
        "\t}\n"
        "\treturn &state\n"
        "}\n"
    )


def render_set_state(state: StateRecord) -> str:
    return (
        f"func setState(state *{state.name}) {{\n"
        "\tval, err := encodingJson.Marshal(state)\n"
        "\tif err != nil {\n"
        '\t\tenv.PanicStr("Failed to serialize state")\n'
        "\t}\n"
        "\terr = env.StateWrite(val)\n"
        "\tif err != nil {\n"
        '\t\tenv.PanicStr("Failed to write state")\n'
        "\t}\n"
        "}\n"
    )


def render_validate_payment() -> str:
    return (
        "func validatePayment(minDepositYoctoStr string) bool {\n"
        "\tminRequired, err := types.U128FromString(minDepositYoctoStr)\n"
        "\tif err != nil {\n"
        '\t\tenv.LogString("Invalid min deposit config: " + minDepositYoctoStr)\n'
        "\t\treturn false\n"
        "\t}\n"
        "\tattachedDeposit, err := env.GetAttachedDeposit()\n"
        "\tif err != nil {\n"
        '\t\tenv.LogString("Failed to get attached deposit")\n'
        "\t\treturn false\n"
        "\t}\n"
        "\tif attachedDeposit.Cmp(minRequired) < 0 {\n"
        '\t\tenv.LogString("Insufficient payment")\n'
        "\t\treturn false\n"
        "\t}\n"
        "\treturn true\n"
        "}\n"
    )


def render_export(method: MethodRecord) -> str:
    """Render the exported wrapper for one method.

    The wrapper acquires state, checks the payment floor, decodes the
    JSON input, calls the method on the state value, persists state for
    mutating methods and returns the JSON encoded result.

    Args:
        method: Exported method.

    Returns:
        Go source of the wrapper function.
    """
    export_name = to_snake_case(method.name)
    logger.debug(f"Rendering export (method={method.name} export={export_name})")
    lines = [
        f"// Export: {export_name} (from {method.relative_path})",
        f"//go:export {export_name}",
        f"func {export_name}() {{",
        "\tcontractBuilder.HandleClientJSONInput(func(input *contractBuilder.ContractInput) error {",
    ]
    lines.extend(_state_acquisition(method))
    lines.extend(_payment_guard(method))

    indent = "\t\t"
    if method.is_promise_callback:
        lines.extend(_promise_wrapper(method))
        indent = "\t\t\t"

    decoded = decoded_params(method)
    lines.extend(render_param_decoder(decoded, indent))
    lines.append("")
    lines.extend(_invocation(method, decoded, indent))

    if method.is_promise_callback:
        lines.append("\t\t})")
        lines.append("\t\treturn nil")
    lines.append("\t})")
    lines.append("}")
    return "\n".join(lines) + "\n"


def is_promise_result(param: Param) -> bool:
    return param.type in _PROMISE_ARGUMENTS


def decoded_params(method: MethodRecord) -> list[Param]:
    """Return the parameters that are decoded from the JSON input."""
    if not method.is_promise_callback:
        return list(method.params)
    return [param for param in method.params if not is_promise_result(param)]


def render_param_decoder(params: Sequence[Param], indent: str) -> list[str]:
    """Render the input decoding step.

    Args:
        params: Parameters decoded from the input payload.
        indent: Leading tabs of the enclosing block.

    Returns:
        Go source lines.
    """
    if not params:
        return [f"{indent}// No parameters to parse"]

    lines = [f"{indent}// Parse input parameters"]
    if len(params) == 1 and params[0].type == RAW_BYTES_TYPE:
        lines.append(f"{indent}var params {RAW_BYTES_TYPE}")
        lines.append(f"{indent}// Raw bytes requested, skipping JSON unmarshal")
        lines.append(f"{indent}params = input.Data")
        return lines

    if _decodes_whole_payload(params):
        param_type = params[0].type
        lines.append(f"{indent}var params {param_type}")
        failure = f"Failed to parse {param_type} parameter"
    else:
        lines.append(f"{indent}var params struct {{")
        for param in params:
            field_name = capitalize_first(param.name)
            lines.append(f'{indent}\t{field_name} {param.type} `json:"{param.name}"`')
        lines.append(f"{indent}}}")
        failure = "Failed to parse input parameters"

    lines.append(f"{indent}err := encodingJson.Unmarshal(input.Data, &params)")
    lines.append(f"{indent}if err != nil {{")
    lines.append(f'{indent}\tenv.PanicStr("{_go_escape(failure)}")')
    lines.append(f"{indent}}}")
    return lines


def _decodes_whole_payload(params: Sequence[Param]) -> bool:
    return len(params) == 1 and not is_basic_type(params[0].type)


def _state_acquisition(method: MethodRecord) -> list[str]:
    if not method.is_init:
        return ["\t\tstate := getState()", ""]
    return [
        "\t\t// Initialization: Check if already initialized",
        "\t\texistingVal, _ := env.StateRead()",
        "\t\tif len(existingVal) > 0 {",
        '\t\t\tenv.PanicStr("Contract already initialized")',
        "\t\t}",
        "\t\tstate := defaultInit()",
        "",
    ]


def _payment_guard(method: MethodRecord) -> list[str]:
    if not (method.is_payable and method.min_deposit):
        return []
    yocto_amount = to_yocto(method.min_deposit)
    return [
        f'\t\tif !validatePayment("{yocto_amount}") {{',
        '\t\t\tenv.PanicStr("Insufficient payment")',
        "\t\t}",
        "",
    ]


def _promise_wrapper(method: MethodRecord) -> list[str]:
    if any(param.type == f"[]{PROMISE_RESULT_TYPE}" for param in method.params):
        return [
            "\t\t// Promise Callback Wrapper (Multiple Results)",
            "\t\tcontractBuilder.HandlePromiseResults(func(promRes []promise.PromiseResult) error {",
        ]
    return [
        "\t\t// Promise Callback Wrapper (Single Result)",
        "\t\tcontractBuilder.HandlePromiseResult(func(promRes *promise.PromiseResult) error {",
    ]


def _return_shape(method: MethodRecord) -> _ReturnShape:
    returns_error = bool(method.returns) and method.returns[-1] == "error"
    data_count = len(method.returns) - 1 if returns_error else len(method.returns)
    return _ReturnShape(data_count=data_count, returns_error=returns_error)


def _call_arguments(method: MethodRecord, decoded: Sequence[Param]) -> list[str]:
    whole_payload = _decodes_whole_payload(decoded)
    raw_bytes = len(decoded) == 1 and decoded[0].type == RAW_BYTES_TYPE
    arguments: list[str] = []
    for param in method.params:
        if method.is_promise_callback and is_promise_result(param):
            arguments.append(_PROMISE_ARGUMENTS[param.type])
            continue
        if whole_payload or raw_bytes:
            argument = "params"
        else:
            argument = f"params.{capitalize_first(param.name)}"
        if param.variadic:
            argument += "..."
        arguments.append(argument)
    return arguments


def _invocation(method: MethodRecord, decoded: Sequence[Param], indent: str) -> list[str]:
    shape = _return_shape(method)
    targets: list[str] = []
    if shape.data_count == 1:
        targets.append("result")
    elif shape.data_count > 1:
        targets.extend(f"res{index}" for index in range(shape.data_count))
    if shape.returns_error:
        targets.append("callErr")

    call = f"state.{method.name}({', '.join(_call_arguments(method, decoded))})"
    if targets:
        call = f"{', '.join(targets)} := {call}"
    lines = [f"{indent}// Call method", f"{indent}{call}", ""]

    if shape.returns_error:
        lines.extend(
            [
                f"{indent}if callErr != nil {{",
                f"{indent}\tenv.PanicStr(callErr.Error())",
                f"{indent}}}",
                "",
            ]
        )
    if shape.data_count > 1:
        values = ", ".join(f"res{index}" for index in range(shape.data_count))
        lines.extend([f"{indent}result := []interface{{}}{{{values}}}", ""])
    if method.is_mutating or method.is_init:
        lines.extend([f"{indent}setState(state)", ""])
    if shape.data_count > 0:
        lines.extend(
            [
                f"{indent}resultJSON, err := encodingJson.Marshal(result)",
                f"{indent}if err != nil {{",
                f'{indent}\tenv.PanicStr("Failed to marshal result to JSON")',
                f"{indent}}}",
                f"{indent}contractBuilder.ReturnValue(string(resultJSON))",
            ]
        )
    lines.append(f"{indent}return nil")
    return lines


def _go_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')
