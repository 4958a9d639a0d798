import os
import sys

import pytest


def write_script(directory, name, body):
    """在 directory 下写入可执行脚本并返回文件名。"""
    path = os.path.join(str(directory), name)
    with open(path, "w", encoding="utf-8") as f:
        f.write(body)
    os.chmod(path, 0o755)
    return name


@pytest.fixture
def echo_target(tmp_path):
    """原样回显输入并以 0 退出。"""
    return write_script(tmp_path, "echo.sh", "#!/bin/sh\ncat\n")


@pytest.fixture
def tag_checking_target(tmp_path):
    """输入中缺少成对的 <tag>...</tag> 时以 2 退出。"""
    body = (
        f"#!{sys.executable}\n"
        "import re, sys\n"
        "data = sys.stdin.buffer.read().decode('utf-8', 'replace')\n"
        "if re.search(r'<(\\w+)[^>]*>.*?</\\1>', data, re.S):\n"
        "    sys.exit(0)\n"
        "print('Error: no matching tag pair')\n"
        "sys.exit(2)\n"
    )
    return write_script(tmp_path, "check_tags.py", body)


posix_only = pytest.mark.skipif(sys.platform == "win32", reason="POSIX shell targets")
