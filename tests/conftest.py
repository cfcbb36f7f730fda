# tests/conftest.py
from __future__ import annotations

import sys
from pathlib import Path

# 项目根目录 = tests 上一层目录
ROOT = Path(__file__).resolve().parents[1]
TESTS = Path(__file__).resolve().parent

# 确保项目根在 sys.path 中，方便 `import colorpick` 等绝对导入；
# tests 目录本身也加入，测试替身统一从 `dummies` 导入
for p in (str(ROOT), str(TESTS)):
    if p not in sys.path:
        sys.path.insert(0, p)
