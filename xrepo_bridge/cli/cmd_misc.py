"""辅助命令：locate, probe"""

from __future__ import annotations

import click


def register(main: click.Group) -> None:
    main.add_command(locate)
    main.add_command(probe)


@click.command()
@click.pass_context
def locate(ctx: click.Context) -> None:
    """输出 xmake 路径（必要且允许时自动安装）"""
    from xrepo_bridge.cli import _service, run_or_fail

    path = run_or_fail(_service(ctx).locate)
    if path is None:
        click.echo("xrepo packages disabled")
        return
    click.echo(path)


@click.command()
@click.pass_context
def probe(ctx: click.Context) -> None:
    """检查 xrepo fetch 是否支持 --json"""
    from xrepo_bridge.cli import _service, run_or_fail

    supported = run_or_fail(_service(ctx).json_support)
    if supported is None:
        click.echo("xrepo packages disabled")
        return
    click.echo(f"xrepo fetch --json support: {'ON' if supported else 'OFF'}")
