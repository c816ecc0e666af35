# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""End-to-end tests for export glue generation."""

import logging
from collections.abc import Callable
from pathlib import Path

import pytest

from contractgen import (
    AmbiguousInitError,
    AmbiguousStateError,
    GeneratorConfig,
    IncompatibleAnnotationsError,
    MissingStateError,
    collect_project,
    generate,
)

ProjectFactory = Callable[..., Path]

STATE = "// @contract:state\ntype Contract struct {\n\tMessage string\n\tCount   int\n}\n"


def _contract(body: str, imports: str = "") -> str:
    return f"package main\n\n{imports}{STATE}\n{body}"


def _export_block(generated: str, export_name: str) -> str:
    start = generated.index(f"// Export: {export_name} ")
    end = generated.find("// Export: ", start + 1)
    if end == -1:
        end = generated.index("// ===== Helper Functions =====")
    return generated[start:end]


def test_ph5_gen_001_generate_emits_state_accessors_for_declared_state(
    go_project: ProjectFactory,
) -> None:
    root = go_project(
        main=_contract(
            "// @contract:view\n"
            "func (c *Contract) Get() string {\n"
            "\treturn c.Message\n"
            "}\n"
        )
    )

    generated = generate(root)

    assert generated.startswith("// Code generated by NEAR contract generator. DO NOT EDIT.\n")
    assert "\npackage main\n" in generated
    assert "func defaultInit() *Contract {\n\treturn &Contract{}\n}" in generated
    assert "func getState() *Contract {" in generated
    assert "encodingJson.Unmarshal(val, &state)" in generated
    assert "func setState(state *Contract) {" in generated
    assert "encodingJson.Marshal(state)" in generated
    assert "func validatePayment(minDepositYoctoStr string) bool {" in generated
    assert 'encodingJson "encoding/json"' in generated
    assert "borsh" not in generated


def test_ph5_gen_002_generate_builds_capitalized_parameter_struct(
    go_project: ProjectFactory,
) -> None:
    root = go_project(
        main=_contract(
            "// @contract:mutating\n"
            "func (c *Contract) SendMessage(newMessage string, userId int, isActive bool) {\n"
            "\t// logic\n"
            "}\n"
        )
    )

    generated = generate(root)

    block = _export_block(generated, "send_message")
    assert "//go:export send_message\nfunc send_message() {" in block
    assert "NewMessage string `json:\"newMessage\"`" in block
    assert "UserId int `json:\"userId\"`" in block
    assert "IsActive bool `json:\"isActive\"`" in block
    assert "state.SendMessage(params.NewMessage, params.UserId, params.IsActive)" in block
    assert 'env.PanicStr("Failed to parse input parameters")' in block


def test_ph5_gen_003_generate_guards_init_and_payment(go_project: ProjectFactory) -> None:
    root = go_project(
        main=_contract(
            "// @contract:init\n"
            "// @contract:payable min_deposit=1NEAR\n"
            "func (c *Contract) InitContract(startMsg string) {\n"
            "\tc.Message = startMsg\n"
            "}\n"
        )
    )

    generated = generate(root)

    block = _export_block(generated, "init_contract")
    assert "existingVal, _ := env.StateRead()" in block
    assert 'env.PanicStr("Contract already initialized")' in block
    assert "state := defaultInit()" in block
    assert "getState()" not in block
    assert 'validatePayment("1000000000000000000000000")' in block
    assert 'env.PanicStr("Insufficient payment")' in block
    assert block.index("validatePayment(") < block.index("state.InitContract(")
    assert block.index("state.InitContract(params.StartMsg)") < block.index("setState(state)")


def test_ph5_gen_004_generate_decodes_single_compound_parameter_directly(
    go_project: ProjectFactory,
) -> None:
    root = go_project(
        main=_contract(
            "type Item struct {\n\tName string `json:\"name\"`\n}\n\n"
            "// @contract:mutating\n"
            "func (c *Contract) AddItem(item Item) error {\n\treturn nil\n}\n"
        )
    )

    generated = generate(root)

    block = _export_block(generated, "add_item")
    assert "var params Item\n" in block
    assert "var params struct" not in block
    assert "callErr := state.AddItem(params)" in block
    assert "params." not in block
    assert 'env.PanicStr("Failed to parse Item parameter")' in block
    assert "env.PanicStr(callErr.Error())" in block


def test_ph5_gen_005_generate_binds_raw_bytes_without_decoding(
    go_project: ProjectFactory,
) -> None:
    root = go_project(
        main=_contract("// @contract:mutating\nfunc (c *Contract) Store(data []byte) {}\n")
    )

    block = _export_block(generate(root), "store")

    assert "params = input.Data" in block
    assert "Unmarshal(input.Data" not in block
    assert "state.Store(params)" in block


def test_ph5_gen_006_generate_keeps_collection_parameters_in_struct(
    go_project: ProjectFactory,
) -> None:
    root = go_project(
        main=_contract(
            "// @contract:view\n"
            "func (c *Contract) UpdateList(items []string, data map[string]int) {}\n"
        )
    )

    block = _export_block(generate(root), "update_list")

    assert "Items []string `json:\"items\"`" in block
    assert "Data map[string]int `json:\"data\"`" in block
    assert "setState(state)" not in block


def test_ph5_gen_007_generate_never_exports_private_methods(
    go_project: ProjectFactory,
) -> None:
    root = go_project(
        main=_contract(
            "// @contract:public\nfunc (c *Contract) PublicMethod() {}\n\n"
            "// @contract:private\nfunc (c *Contract) InternalHelper() {}\n\n"
            "// @contract:private\n// @contract:view\n"
            "func (c *Contract) HiddenView() int { return 1 }\n\n"
            "// @contract:view\nfunc (c *Contract) ViewMethod() {}\n"
        )
    )

    generated = generate(root)

    assert "func public_method()" in generated
    assert "func view_method()" in generated
    assert "func internal_helper()" not in generated
    assert "func hidden_view()" not in generated
    assert "func (c *Contract) InternalHelper() {}" in generated


def test_ph5_gen_008_generate_marshals_results(go_project: ProjectFactory) -> None:
    root = go_project(
        main=_contract(
            "// @contract:view\n"
            "func (c *Contract) GetStatus() (bool, string) {\n"
            "\treturn true, \"ok\"\n"
            "}\n\n"
            "// @contract:view\n"
            "func (c *Contract) GetMap() map[string]int {\n"
            "\treturn nil\n"
            "}\n\n"
            "// @contract:view\n"
            "func (c *Contract) Lookup(key string) (string, error) {\n"
            "\treturn key, nil\n"
            "}\n"
        )
    )

    generated = generate(root)

    status = _export_block(generated, "get_status")
    assert "res0, res1 := state.GetStatus()" in status
    assert "result := []interface{}{res0, res1}" in status
    assert "resultJSON, err := encodingJson.Marshal(result)" in status
    assert "contractBuilder.ReturnValue(string(resultJSON))" in status

    single = _export_block(generated, "get_map")
    assert "result := state.GetMap()" in single
    assert 'env.PanicStr("Failed to marshal result to JSON")' in single

    lookup = _export_block(generated, "lookup")
    assert "result, callErr := state.Lookup(params.Key)" in lookup
    assert lookup.index("callErr != nil") < lookup.index("encodingJson.Marshal(result)")


def test_ph5_gen_009_generate_persists_state_before_returning_result(
    go_project: ProjectFactory,
) -> None:
    root = go_project(
        main=_contract(
            "// @contract:mutating\nfunc (c *Contract) Bump(by int) (int, error) {\n"
            "\tc.Count += by\n\treturn c.Count, nil\n}\n"
        )
    )

    block = _export_block(generate(root), "bump")

    call = block.index("result, callErr := state.Bump(params.By)")
    check = block.index("if callErr != nil {")
    persist = block.index("setState(state)")
    emit = block.index("contractBuilder.ReturnValue(")
    assert call < check < persist < emit


def test_ph5_gen_010_generate_preserves_and_merges_imports(
    go_project: ProjectFactory,
) -> None:
    root = go_project(
        main=_contract(
            "// @contract:mutating\n"
            "func (c *Contract) BigMath(num *big.Int) {\n"
            "\tfmt.Println(\"test\")\n"
            "}\n",
            imports='import (\n\t"math/big"\n\t"fmt"\n)\n\n',
        ),
        util=(
            "package main\n\n"
            'import "fmt"\n'
            'import "github.com/vlmoon99/near-sdk-go/env"\n\n'
            "func describe() string {\n"
            "\treturn fmt.Sprint(env.GetCurrentAccountId)\n"
            "}\n"
        ),
    )

    generated = generate(root)

    import_block = generated[generated.index("import (") : generated.index(")\n\n")]
    assert '\t"math/big"\n' in import_block
    assert import_block.count('\t"fmt"\n') == 1
    assert import_block.count('"github.com/vlmoon99/near-sdk-go/env"') == 1
    assert 'contractBuilder "github.com/vlmoon99/near-sdk-go/contract"' in import_block
    assert '"github.com/vlmoon99/near-sdk-go/promise"' not in import_block
    assert "Num *big.Int `json:\"num\"`" not in generated
    assert "var params *big.Int" in generated


def test_ph5_gen_011_generate_calls_method_on_state_regardless_of_receiver_name(
    go_project: ProjectFactory,
) -> None:
    root = go_project(
        main=_contract(
            "// @contract:mutating\nfunc (self *Contract) Increment() {\n\tself.Count++\n}\n\n"
            "// @contract:view\nfunc (c Contract) JustRead() {}\n"
        )
    )

    generated = generate(root)

    assert "\t\tstate.Increment()\n" in generated
    assert "func just_read()" in generated
    assert "// No parameters to parse" in _export_block(generated, "increment")


def test_ph5_gen_012_generate_handles_keyword_like_parameter_names(
    go_project: ProjectFactory,
) -> None:
    root = go_project(
        main=_contract(
            "// @contract:mutating\n"
            "func (c *Contract) EdgeCaseNames(\n"
            "\terror string, input int, state bool, make []int, new string,\n"
            ") {}\n"
        )
    )

    block = _export_block(generate(root), "edge_case_names")

    assert "Error string `json:\"error\"`" in block
    assert "Input int `json:\"input\"`" in block
    assert "State bool `json:\"state\"`" in block
    assert "Make []int `json:\"make\"`" in block
    assert (
        "state.EdgeCaseNames("
        "params.Error, params.Input, params.State, params.Make, params.New)"
    ) in block


def test_ph5_gen_013_generate_wraps_single_promise_callback(
    go_project: ProjectFactory,
) -> None:
    root = go_project(
        main=_contract(
            "// @contract:promise_callback\n"
            "func (c *Contract) OnTransfer(result promise.PromiseResult, memo string) string {\n"
            "\treturn memo\n}\n",
            imports='import "github.com/vlmoon99/near-sdk-go/promise"\n\n',
        )
    )

    generated = generate(root)

    assert generated.count('"github.com/vlmoon99/near-sdk-go/promise"') == 1
    block = _export_block(generated, "on_transfer")
    assert "// Promise Callback Wrapper (Single Result)" in block
    assert (
        "contractBuilder.HandlePromiseResult(func(promRes *promise.PromiseResult) error {"
    ) in block
    assert "\t\t\tvar params struct {\n\t\t\t\tMemo string `json:\"memo\"`\n\t\t\t}" in block
    assert "Result promise.PromiseResult" not in block
    assert "\t\t\tresult := state.OnTransfer(*promRes, params.Memo)" in block
    assert block.endswith("\t\t\treturn nil\n\t\t})\n\t\treturn nil\n\t})\n}\n\n")


def test_ph5_gen_014_generate_wraps_multiple_promise_results(
    go_project: ProjectFactory,
) -> None:
    root = go_project(
        main=_contract(
            "// @contract:promise_callback\n"
            "func (c *Contract) OnAll(results []promise.PromiseResult) {}\n"
        )
    )

    generated = generate(root)

    assert '"github.com/vlmoon99/near-sdk-go/promise"' in generated
    block = _export_block(generated, "on_all")
    assert (
        "contractBuilder.HandlePromiseResults(func(promRes []promise.PromiseResult) error {"
    ) in block
    assert "\t\t\t// No parameters to parse" in block
    assert "state.OnAll(promRes)" in block


def test_ph5_gen_015_generate_spreads_variadic_parameters(
    go_project: ProjectFactory,
) -> None:
    root = go_project(
        main=_contract(
            "// @contract:view\n"
            "func (c *Contract) Sum(base int, values ...int) int {\n"
            "\treturn base\n"
            "}\n"
        )
    )

    block = _export_block(generate(root), "sum")

    assert "Values []int `json:\"values\"`" in block
    assert "result := state.Sum(params.Base, params.Values...)" in block


def test_ph5_gen_016_generate_passes_declarations_through_in_file_order(
    go_project: ProjectFactory,
) -> None:
    root = go_project(
        files={
            "main.go": _contract(
                "// @contract:view\nfunc (c *Contract) Get() int {\n\treturn c.Count\n}\n"
            ),
            "lib/math.go": (
                "package main\n\n"
                "// double doubles.\n"
                "func double(v int) int {\n\treturn v * 2\n}\n"
            ),
            "other/other.go": "package other\n\nfunc Ignored() {}\n",
            "main_test.go": "package main\n\nfunc TestIgnored() {}\n",
        }
    )

    generated = generate(root)

    main_header = generated.index("// ===== From: main.go =====")
    lib_header = generated.index("// ===== From: lib/math.go =====")
    assert main_header < lib_header
    assert "// double doubles.\nfunc double(v int) int {\n\treturn v * 2\n}\n\n" in generated
    assert "Ignored" not in generated
    assert generated.index("// ===== Generated Exports =====") > lib_header


def test_ph5_gen_017_generate_is_deterministic_and_ignores_its_own_output(
    go_project: ProjectFactory,
) -> None:
    root = go_project(
        main=_contract(
            "// @contract:mutating\nfunc (c *Contract) SetMessage(newMessage string) {\n"
            "\tc.Message = strings.TrimSpace(fmt.Sprint(newMessage))\n}\n",
            imports='import (\n\t"strings"\n\t"fmt"\n)\n\n',
        )
    )

    first = generate(root)
    (root / GeneratorConfig().output_file_name).write_text(first, encoding="utf-8")
    second = generate(root)
    third = generate(root, GeneratorConfig(max_workers=4))

    assert first == second == third


@pytest.mark.parametrize(
    ("files", "error"),
    [
        (
            {
                "main.go": (
                    "package main\n\ntype Contract struct {}\n\n"
                    "// @contract:view\nfunc (c *Contract) Get() {}\n"
                )
            },
            MissingStateError,
        ),
        (
            {
                "main.go": _contract("// @contract:view\nfunc (c *Contract) Get() {}\n"),
                "extra.go": "package main\n\n// @contract:state\ntype Other struct {\n\tV int\n}\n",
            },
            AmbiguousStateError,
        ),
        (
            {
                "main.go": _contract(
                    "// @contract:init\nfunc (c *Contract) Init() {}\n\n"
                    "// @contract:init\nfunc (c *Contract) Setup() {}\n"
                )
            },
            AmbiguousInitError,
        ),
        (
            {
                "main.go": _contract(
                    "// @contract:view\n// @contract:mutating\nfunc (c *Contract) Both() {}\n"
                )
            },
            IncompatibleAnnotationsError,
        ),
    ],
)
def test_ph5_gen_018_generate_fails_on_tagging_rule_violations(
    go_project: ProjectFactory, files: dict[str, str], error: type[Exception]
) -> None:
    root = go_project(files=files)

    with pytest.raises(error):
        generate(root)

    assert not (root / GeneratorConfig().output_file_name).exists()


def test_ph5_gen_019_collect_project_records_unparseable_files_and_continues(
    go_project: ProjectFactory,
) -> None:
    root = go_project(
        main=_contract("// @contract:view\nfunc (c *Contract) Get() {}\n"),
        broken="package main\n\nfunc (c *Contract) Broken( {\n",
    )

    scan = collect_project(root)

    assert [skipped.file_path for skipped in scan.skipped] == ["broken.go"]
    assert [method.name for method in scan.methods] == ["Get"]
    assert "func get()" in generate(root)


def test_ph5_gen_020_generate_zeroes_out_of_range_deposit_floor(
    go_project: ProjectFactory, caplog: pytest.LogCaptureFixture
) -> None:
    root = go_project(
        main=_contract(
            "// @contract:payable min_deposit=1e5000NEAR\n"
            "func (c *Contract) Donate() {}\n"
        )
    )

    with caplog.at_level(logging.WARNING, logger="contractgen.amount"):
        generated = generate(root)

    assert 'validatePayment("0")' in _export_block(generated, "donate")
    assert "Out of range min_deposit" in caplog.text
