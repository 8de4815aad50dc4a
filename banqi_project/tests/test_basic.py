"""
基础测试模块

测试项目的基本功能和导入。
"""

import pytest
import sys
from pathlib import Path

# 添加项目根目录到Python路径
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))


def test_project_import():
    """测试项目主模块是否可以正常导入"""
    try:
        import banqi_project
        assert banqi_project.__version__ == "0.1.0"
        assert banqi_project.__author__ == "Banqi Kiro Team"
    except ImportError as e:
        pytest.fail(f"无法导入banqi_project模块: {e}")


def test_submodules_import():
    """测试子模块是否可以正常导入"""
    try:
        from banqi_project.src import banqi_engine

        # 检查版本信息
        assert banqi_engine.__version__ == "0.1.0"

    except ImportError as e:
        pytest.fail(f"无法导入子模块: {e}")


def test_public_api():
    """测试顶层接口可用"""
    from banqi_project.src.banqi_engine import flip, new_game, winner

    board = new_game(seed=0)
    result = flip(board, (0, 0))
    assert result.accepted
    assert winner(result.board) is None


def test_main_entry_points():
    """测试主入口文件是否存在"""
    main_files = [
        "banqi_project/main.py",
        "pyproject.toml",
    ]

    for main_file in main_files:
        file_path = project_root / main_file
        assert file_path.exists(), f"主入口文件 {main_file} 不存在"
