# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

import json
import os

import pytest
import yaml
from azure.cli.core.azclierror import FileOperationError

from ..generators import generate_random_string


class TestCliInit(object):
    def test_package_init(self):
        from azext_hcp.constants import EXTENSION_ROOT

        tests_root = "tests"
        directory_structure = {}

        def _validate_directory(path):
            for entry in os.scandir(path):
                if entry.is_dir(follow_symlinks=False) and all(
                    [not entry.name.startswith("__"), tests_root not in entry.path]
                ):
                    directory_structure[entry.path] = None
                    _validate_directory(entry.path)
                else:
                    if entry.path.endswith("__init__.py"):
                        directory_structure[os.path.dirname(entry.path)] = entry.path

        _validate_directory(EXTENSION_ROOT)

        invalid_directories = []
        for directory in directory_structure:
            if directory_structure[directory] is None:
                invalid_directories.append("Directory: '{}' missing __init__.py".format(directory))

        if invalid_directories:
            pytest.fail(", ".join(invalid_directories))


class TestFileHeaders(object):
    def test_file_headers(self):
        from azext_hcp.constants import EXTENSION_ROOT

        header = """# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------"""

        files_missing_header = []

        def _validate_directory(path):
            for entry in os.scandir(path):
                if entry.is_dir(follow_symlinks=False):
                    _validate_directory(entry.path)
                else:
                    if entry.is_file() and entry.path.endswith(".py"):
                        contents = None
                        with open(entry.path, "rt", encoding="utf-8") as f:
                            contents = f.read()
                        if contents and not contents.startswith(header):
                            files_missing_header.append(entry.path)

        _validate_directory(EXTENSION_ROOT)
        if files_missing_header:
            pytest.fail(
                "The following files are missing an encoding and license header, or it is improperly formatted:\n"
                "{}".format("\n".join(files_missing_header))
            )


@pytest.mark.parametrize("loader_return", [None, generate_random_string()])
@pytest.mark.parametrize("extension", ["json", "yml", "yaml", "txt"])
def test_deserialize_file_content(mocker, extension, loader_return):
    patched_loader = mocker.patch(
        "azext_hcp.hcp.util.file_operations._try_loading_as",
        return_value=loader_return
    )
    patched_reader = mocker.patch(
        "azext_hcp.hcp.util.file_operations.read_file_content",
        return_value=f"{generate_random_string()}\n{generate_random_string()}"
    )
    from azext_hcp.hcp.util import deserialize_file_content
    file_path = f"{generate_random_string()}.{extension}"

    if loader_return is None:
        with pytest.raises(FileOperationError):
            deserialize_file_content(file_path=file_path)
    else:
        result = deserialize_file_content(file_path=file_path)
        assert result == loader_return

    call_count = 0
    if extension not in ["yml", "yaml"]:
        json_kwargs = patched_loader.call_args_list[call_count].kwargs
        assert json_kwargs["loader"] == json.loads
        assert json_kwargs["content"] == patched_reader.return_value
        assert json_kwargs["error_type"] == json.JSONDecodeError
        assert json_kwargs["raise_error"] == (extension == "json")
        call_count += 1

    multiple_calls = extension == "txt" and loader_return is None
    if extension in ["yml", "yaml"] or multiple_calls:
        yaml_kwargs = patched_loader.call_args_list[call_count].kwargs
        assert yaml_kwargs["loader"] == yaml.safe_load
        assert yaml_kwargs["content"] == patched_reader.return_value
        assert yaml_kwargs["error_type"] == yaml.YAMLError
        call_count += 1
    assert patched_loader.call_count == call_count


def test_read_file_content(tmp_path):
    from azext_hcp.hcp.util import read_file_content

    expected_content = generate_random_string(1024)
    file_path = tmp_path / "content.txt"
    file_path.write_text(expected_content, encoding="utf-8-sig")
    assert read_file_content(file_path=str(file_path)) == expected_content

    binary_content = os.urandom(64)
    binary_path = tmp_path / "content.bin"
    binary_path.write_bytes(binary_content)
    assert read_file_content(file_path=str(binary_path), read_as_binary=True) == binary_content

    non_existant_path = "/some/path/that/doesnt/exist"
    with pytest.raises(FileOperationError, match=f"{non_existant_path} does not exist."):
        read_file_content(file_path=non_existant_path)

    with pytest.raises(FileOperationError, match="is not a file."):
        read_file_content(file_path=str(tmp_path))


def test_write_content_to_file(tmp_path):
    from azext_hcp.hcp.util import write_content_to_file

    content = generate_random_string()
    file_path = tmp_path / "nested" / "dir" / "output.yaml"
    result = write_content_to_file(content=content, file_path=str(file_path))
    assert result == str(file_path)
    assert file_path.read_text(encoding="utf-8") == content

    overwrite_content = generate_random_string()
    write_content_to_file(content=overwrite_content, file_path=str(file_path))
    assert file_path.read_text(encoding="utf-8") == overwrite_content
