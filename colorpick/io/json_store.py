# File: colorpick/io/json_store.py
from __future__ import annotations

import json
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional
from uuid import uuid4


@dataclass
class JsonStoreError(Exception):
    path: Path
    message: str
    cause: Optional[BaseException] = None

    def __str__(self) -> str:
        base = f"{self.message} (path={self.path})"
        if self.cause is not None:
            return f"{base}; cause={type(self.cause).__name__}: {self.cause}"
        return base


class JsonReadError(JsonStoreError):
    pass


class JsonWriteError(JsonStoreError):
    pass


def ensure_dir(dir_path: Path) -> None:
    try:
        dir_path.mkdir(parents=True, exist_ok=True)
    except Exception as e:
        raise JsonWriteError(path=dir_path, message="Failed to create directory", cause=e) from e


def read_json(path: Path, *, default: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    读取 settings.json 之类的 JSON 对象。

    - 文件不存在或为空：返回 default（或 {}）
    - 内容不是合法 JSON 对象：JsonReadError
    """
    if default is None:
        default = {}

    try:
        if not path.exists():
            return dict(default)

        raw = path.read_text(encoding="utf-8").strip()
        if raw == "":
            return dict(default)

        data = json.loads(raw)
    except Exception as e:
        raise JsonReadError(path=path, message="Failed to read/parse JSON", cause=e) from e

    if not isinstance(data, dict):
        raise JsonReadError(path=path, message="JSON root must be an object")
    return data


def atomic_write_json(path: Path, data: Dict[str, Any], *, indent: int = 2) -> None:
    """
    Write to a temp file in the same directory, fsync, then os.replace.
    The existing file is left intact if anything fails.
    """
    if not isinstance(data, dict):
        raise JsonWriteError(path=path, message="atomic_write_json expects `data` to be a dict")

    ensure_dir(path.parent)
    tmp_path = path.parent / f".{path.name}.{uuid4().hex}.tmp"

    try:
        payload = json.dumps(data, ensure_ascii=False, indent=indent, sort_keys=True)
        with open(tmp_path, "wb") as f:
            f.write(payload.encode("utf-8"))
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except Exception as e:
        raise JsonWriteError(path=path, message="Failed to write JSON atomically", cause=e) from e
    finally:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)


def quarantine(path: Path) -> Path:
    """
    把读不出来的文件改名放到一边（settings.json -> settings.json.corrupt-20240101-120000），
    返回新路径；调用方随后可以重新写入默认内容。
    """
    stamp = time.strftime("%Y%m%d-%H%M%S")
    target = path.with_name(f"{path.name}.corrupt-{stamp}")
    n = 1
    while target.exists():
        target = path.with_name(f"{path.name}.corrupt-{stamp}-{n}")
        n += 1
    try:
        os.replace(path, target)
    except Exception as e:
        raise JsonWriteError(path=path, message="Failed to move corrupt file aside", cause=e) from e
    return target
