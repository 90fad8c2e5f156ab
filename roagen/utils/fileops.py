import json
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, Optional, TextIO


def _atomic_write(path: Path, write: Callable[[TextIO], None], mode: int):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
            'w', dir=str(path.parent), encoding='utf-8', delete=False) as tmp:
        tmp_path = Path(tmp.name)
        try:
            write(tmp)
        except BaseException:
            tmp.close()
            tmp_path.unlink()
            raise
    os.replace(tmp_path, path)
    os.chmod(path, mode)


def atomic_write_json(path: Path, data: Dict[str, Any], mode: int = 0o644,
                      indent: Optional[int] = None):
    """Atomically write JSON file with specified permissions"""
    separators = (',', ':') if indent is None else None
    _atomic_write(path, lambda f: json.dump(data, f, indent=indent, separators=separators), mode)


def atomic_write_text(path: Path, content: str, mode: int = 0o644):
    """Atomically write text file with specified permissions"""
    _atomic_write(path, lambda f: f.write(content), mode)
