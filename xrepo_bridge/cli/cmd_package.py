"""包安装命令：package, sync"""

from __future__ import annotations

import click

from xrepo_bridge.core.models import PackageRequest, Verbosity
from xrepo_bridge.core.publisher import OUTPUT_FORMATS, PublishedVariables, render
from xrepo_bridge.utils.yaml_io import atomic_write


def register(main: click.Group) -> None:
    """注册包安装相关命令"""
    main.add_command(package)
    main.add_command(sync)


def _emit(results: list[PublishedVariables], fmt: str, out: str | None) -> None:
    text = render(results, fmt)
    if out:
        atomic_write(out, text)
        click.echo(f"已写入: {out}", err=True)
    else:
        click.echo(text, nl=False)


_format_option = click.option(
    "--format", "-f", "fmt", default="cmake", show_default=True,
    type=click.Choice(OUTPUT_FORMATS), help="输出格式",
)
_out_option = click.option(
    "--out", "-o", default=None, help="输出文件（默认 stdout）",
)


@click.command()
@click.argument("spec")
@click.option("--configs", default=None, help="包配置，格式: k1=v1,k2=v2")
@click.option("--mode", default=None, help="debug|release，不指定时按构建类型推断")
@click.option("--output", "verbosity", default=None,
              type=click.Choice([v.value for v in Verbosity], case_sensitive=False),
              help="install 输出级别")
@click.option("--directory-scope", is_flag=True, help="同时输出 include_directories / link_directories")
@_format_option
@_out_option
@click.pass_context
def package(
    ctx: click.Context, spec: str, configs: str | None, mode: str | None,
    verbosity: str | None, directory_scope: bool, fmt: str, out: str | None,
) -> None:
    """安装单个包并输出其构建变量，SPEC 如 'zlib 1.2.11'"""
    from xrepo_bridge.cli import _service, run_or_fail

    request = run_or_fail(
        PackageRequest.create, spec, configs=configs, mode=mode,
        output=verbosity, directory_scope=directory_scope,
    )
    svc = _service(ctx)
    published = run_or_fail(svc.package, request)
    _emit([published], fmt, out)


@click.command()
@click.argument("manifest", default="xrepo-packages.yml")
@_format_option
@_out_option
@click.pass_context
def sync(ctx: click.Context, manifest: str, fmt: str, out: str | None) -> None:
    """按清单依次安装全部包并输出构建变量"""
    from xrepo_bridge.cli import _service, run_or_fail

    svc = _service(ctx)
    results = run_or_fail(svc.sync, manifest)
    _emit(results, fmt, out)
