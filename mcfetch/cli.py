"""
CLI 模块

命令行接口实现。
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

import click
import toml
import yaml
from loguru import logger

from mcfetch.exceptions import McFetchError
from mcfetch.logger import setup_logger
from mcfetch.models import DirectoryMode, InstallProgress, McFetchConfig
from mcfetch.orchestrator import InstallOrchestrator
from mcfetch.services import ManifestResolver, MirrorClient


def load_config(config_path: Optional[str]) -> dict:
    """加载配置文件"""
    if config_path is None:
        return {}

    path = Path(config_path)
    if not path.exists():
        raise click.ClickException(f"配置文件不存在: {config_path}")

    suffix = path.suffix.lower()
    if suffix == ".toml":
        return toml.load(config_path)
    elif suffix == ".json":
        return json.loads(path.read_text())
    elif suffix in (".yaml", ".yml"):
        return yaml.safe_load(path.read_text()) or {}
    else:
        raise click.ClickException(f"不支持的配置文件格式: {suffix}")


def build_config(
    config_path: Optional[str],
    directory: Optional[str] = None,
    mode: Optional[str] = None,
    mirror: Optional[str] = None,
    platform: Optional[str] = None,
) -> McFetchConfig:
    """读取配置文件并应用命令行覆盖项"""
    data = load_config(config_path)
    directory_cfg = dict(data.get("directory", {}))
    if directory:
        directory_cfg["mode"] = DirectoryMode.CUSTOM.value
        directory_cfg["custom_path"] = directory
    elif mode:
        directory_cfg["mode"] = mode
    data["directory"] = directory_cfg
    if mirror:
        data["mirror"] = dict(data.get("mirror", {}), base_url=mirror)
    if platform:
        data["platform"] = platform
    return McFetchConfig.from_dict(data)


class ProgressPrinter:
    """把进度变化输出到日志"""

    def __init__(self, step: int = 50):
        self.step = step
        self._last_stage = None

    def __call__(self, progress: InstallProgress):
        if progress.stage != self._last_stage:
            self._last_stage = progress.stage
            logger.info(f"[阶段] {progress.stage.value}")
        if progress.downloading_libraries and progress.library_completed:
            if (
                progress.library_completed % self.step == 0
                or progress.library_completed == progress.library_total
            ):
                logger.info(
                    f"[进度] 库文件 {progress.library_completed}/{progress.library_total}"
                )
        if progress.downloading_assets and progress.asset_completed:
            if (
                progress.asset_completed % self.step == 0
                or progress.asset_completed == progress.asset_total
            ):
                logger.info(
                    f"[进度] 资源 {progress.asset_completed}/{progress.asset_total}"
                )


async def run_install(config: McFetchConfig, version: Optional[str]) -> dict:
    orchestrator = InstallOrchestrator(config, observer=ProgressPrinter())
    await orchestrator.run(version)
    return orchestrator.get_stats()


async def run_versions(config: McFetchConfig, version_type: Optional[str], limit: int):
    async with MirrorClient(config.mirror, config.download) as client:
        resolver = ManifestResolver(client)
        versions = await resolver.fetch_version_list()
        release = await resolver.latest("release", versions)
        snapshot = await resolver.latest("snapshot", versions)

    click.echo(f"最新正式版: {release or '-'}")
    click.echo(f"最新快照版: {snapshot or '-'}")
    for entry in versions.filter(version_type)[:limit]:
        click.echo(f"  {entry.id:<24} {entry.type:<10} {entry.release_time}")


@click.group()
@click.option("--debug", is_flag=True, help="启用调试模式")
@click.version_option(version="0.1.0")
def main(debug: bool):
    """McFetch - Minecraft 游戏文件下载工具"""
    setup_logger(level="DEBUG" if debug else None)


@main.command()
@click.argument("version", required=False)
@click.option("-c", "--config", "config_path", type=click.Path(exists=True), help="配置文件")
@click.option("-d", "--dir", "directory", help="自定义安装目录（绝对路径）")
@click.option(
    "--mode",
    type=click.Choice([m.value for m in DirectoryMode]),
    help="安装目录模式",
)
@click.option("--mirror", help="镜像站地址")
@click.option(
    "--platform",
    type=click.Choice(["osx", "linux", "windows"]),
    help="目标平台（默认为当前系统）",
)
def install(
    version: Optional[str],
    config_path: Optional[str],
    directory: Optional[str],
    mode: Optional[str],
    mirror: Optional[str],
    platform: Optional[str],
):
    """下载并安装指定版本"""
    try:
        config = build_config(config_path, directory, mode, mirror, platform)
        stats = asyncio.run(run_install(config, version))
    except McFetchError as e:
        raise click.ClickException(str(e))
    except click.ClickException:
        raise
    except Exception as e:
        logger.exception(f"运行时错误: {e}")
        raise click.ClickException(f"运行时错误: {e}")

    progress = stats["progress"]
    click.echo(
        f"完成! 库文件 {progress['library_completed']}/{progress['library_total']}, "
        f"资源 {progress['asset_completed']}/{progress['asset_total']}, "
        f"下载 {stats['downloaded']} 个, 跳过 {stats['skipped']} 个"
    )


@main.command()
@click.option("-c", "--config", "config_path", type=click.Path(exists=True), help="配置文件")
@click.option("--type", "version_type", help="版本类型 (release / snapshot / old_beta / old_alpha)")
@click.option("--limit", default=20, show_default=True, help="最多显示数量")
@click.option("--mirror", help="镜像站地址")
def versions(
    config_path: Optional[str],
    version_type: Optional[str],
    limit: int,
    mirror: Optional[str],
):
    """列出可用版本"""
    try:
        config = build_config(config_path, mirror=mirror)
        asyncio.run(run_versions(config, version_type, limit))
    except McFetchError as e:
        raise click.ClickException(str(e))


if __name__ == "__main__":
    main()
