#!/usr/bin/env python3
"""
Banqi Kiro 主入口文件

提供统一的命令行接口：系统信息、终端对局和棋局验证。
"""

import sys
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from banqi_project import __version__, __description__
from banqi_project.src.banqi_engine.config import ConfigManager, SessionConfig
from banqi_project.src.banqi_engine.game_interface import SessionManager
from banqi_project.src.banqi_engine.rules_engine import (
    PIECE_RANKS, BanqiBoard, BoardValidator, Move, PieceType, PlayerColor
)
from banqi_project.src.banqi_engine.utils import setup_logger, setup_logger_from_config

console = Console()

HELP_TEXT = (
    "命令: flip r c | move r c r c | move a0b0 | targets r c | pieces | surrender | reset | log | help | quit"
)


def print_banner():
    """打印项目横幅"""
    banner_text = Text()
    banner_text.append("Banqi Kiro\n", style="bold blue")
    banner_text.append(f"版本: {__version__}\n", style="green")
    banner_text.append(__description__, style="white")

    panel = Panel(
        banner_text,
        title="暗棋系统",
        title_align="center",
        border_style="blue",
        padding=(1, 2)
    )
    console.print(panel)


def _print_board(manager: SessionManager, session_id: str):
    """打印文本棋盘和当前状态"""
    session = manager.get_session(session_id)
    board = session.board
    console.print(board.to_text(), markup=False, highlight=False)

    colors = {seat: (color.value if color else '?') for seat, color in board.player_colors.items()}
    console.print(f"[cyan]P1: {colors[0]}  P2: {colors[1]}  "
                  f"轮到: Player {board.current_seat + 1}[/cyan]")
    for color in PlayerColor:
        captured = board.captured_pieces(color)
        if captured:
            seat = board.seat_of(color)
            owner = f"P{seat + 1}" if seat is not None else color.value
            console.print(f"{owner} 阵亡: " + " ".join(p.chinese_name() for p in captured), markup=False)
    if board.winner is not None:
        console.print(f"[bold green]PLAYER {board.winner + 1} WINS! ({board.win_reason.value})[/bold green]")


def _print_counts(board: BanqiBoard):
    """按类型打印双方在场棋子数量"""
    for color in PlayerColor:
        counts = board.count_pieces(color)
        order = sorted(PieceType, key=lambda t: PIECE_RANKS[t], reverse=True)
        parts = [f"{t.value}:{counts[t]}" for t in order if counts.get(t)]
        console.print(f"{color.value} ({sum(counts.values())}): " + " ".join(parts), markup=False)


def _parse_ints(args, count: int):
    if len(args) != count:
        raise ValueError(f"需要{count}个整数参数")
    return [int(a) for a in args]


def _report(result):
    if result.accepted:
        if result.captured:
            console.print(f"[red]吃子: {result.captured_id}[/red]")
    else:
        console.print(f"[yellow]动作被拒绝: {result.rejection.value}[/yellow]")


@click.group()
@click.version_option(version=__version__, prog_name="Banqi Kiro")
@click.option('--debug', is_flag=True, help='启用调试日志')
def cli(debug: bool):
    """暗棋系统 - 4x8暗棋规则引擎与对局会话管理"""
    if debug:
        setup_logger(level='DEBUG')
        console.print("[yellow]调试模式已启用[/yellow]")


@cli.command()
def info():
    """显示系统信息"""
    print_banner()


@cli.command()
@click.option('--seed', type=int, default=None, help='洗牌随机种子')
@click.option('--config', 'config_dir', type=click.Path(file_okay=False), default=None,
              help='配置目录')
def play(seed: Optional[int], config_dir: Optional[str]):
    """在终端中进行双人对局"""
    if config_dir:
        config_manager = ConfigManager(config_dir)
        session_config = config_manager.get_session_config()
        setup_logger_from_config(config_manager.get_logging_config())
    else:
        session_config = SessionConfig()

    if seed is not None:
        session_config.seed = seed

    manager = SessionManager(session_config)
    session_id = manager.create_session()
    console.print(HELP_TEXT)

    while True:
        _print_board(manager, session_id)
        try:
            line = click.prompt("banqi", prompt_suffix="> ")
        except click.Abort:
            break

        parts = line.split()
        if not parts:
            continue
        command, args = parts[0].lower(), parts[1:]

        try:
            if command in ('quit', 'exit'):
                break
            elif command == 'help':
                console.print(HELP_TEXT)
            elif command == 'flip':
                row, col = _parse_ints(args, 2)
                _report(manager.flip(session_id, (row, col)))
            elif command == 'move':
                if len(args) == 1:
                    notation = Move.from_coordinate_notation(args[0].lower(), piece_id="")
                    from_pos, to_pos = notation.from_pos, notation.to_pos
                else:
                    r1, c1, r2, c2 = _parse_ints(args, 4)
                    from_pos, to_pos = (r1, c1), (r2, c2)
                _report(manager.move_from(session_id, from_pos, to_pos))
            elif command == 'pieces':
                _print_counts(manager.get_session(session_id).board)
            elif command == 'targets':
                row, col = _parse_ints(args, 2)
                targets = sorted(manager.legal_targets(session_id, (row, col)))
                console.print(f"可走: {targets}", markup=False)
            elif command == 'surrender':
                _report(manager.surrender(session_id))
            elif command == 'reset':
                manager.reset(session_id)
            elif command == 'log':
                for entry in manager.get_session(session_id).logs:
                    console.print(entry, markup=False)
            else:
                console.print(f"[red]未知命令: {command}[/red]")
        except ValueError as e:
            console.print(f"[red]参数错误: {e}[/red]")

    console.print("[blue]对局结束[/blue]")


@cli.command()
@click.option('--seed', type=int, default=None, help='洗牌随机种子')
def validate(seed: Optional[int]):
    """发一副新牌并输出验证报告"""
    board = BanqiBoard.new_game(seed=seed)
    console.print(str(board.to_matrix(reveal_hidden=True)), markup=False, highlight=False)
    report = BoardValidator().get_validation_report(board)
    for name, item in report['validations'].items():
        status = "[green]OK[/green]" if item['valid'] else f"[red]{item['error_count']} 个错误[/red]"
        console.print(f"{name}: {status}")
    if not report['overall_valid']:
        sys.exit(1)


def main():
    """主入口函数"""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]程序被用户中断[/yellow]")
        sys.exit(0)


if __name__ == "__main__":
    main()
