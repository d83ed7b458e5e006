"""CLI 命令列工具

提供同日預報查詢與參考表檢視等命令列功能。
"""

import asyncio
import json

import click

from powercast.analytics.reference import calibration_entries, seasonal_factors
from powercast.config import configure_logging
from powercast.exceptions import DataProviderError
from powercast.services.forecast import ForecastService


@click.group()
@click.option("--log-level", default=None, help="日誌等級（預設讀取設定）")
def cli(log_level):
    """powercast CLI 工具"""
    configure_logging(log_level)


@cli.command()
@click.argument("lat", type=float)
@click.argument("lon", type=float)
@click.argument("date")
@click.option("--hour", type=click.IntRange(0, 23), default=None, help="逐時預報的小時")
@click.option("--year", type=int, default=None, help="目前年份（預設為系統年份）")
def forecast(lat, lon, date, hour, year):
    """查詢 LAT LON 在 DATE (MMDD) 的同日預報"""
    if len(date) != 4 or not date.isdigit():
        raise click.BadParameter("必須為 MMDD 格式", param_hint="DATE")

    month, day = int(date[:2]), int(date[2:])
    if not 1 <= month <= 12 or not 1 <= day <= 31:
        raise click.BadParameter("月份須為 01-12，日期須為 01-31", param_hint="DATE")

    service = ForecastService()
    try:
        report = asyncio.run(
            service.forecast(lat, lon, month, day, hour=hour, current_year=year)
        )
    except DataProviderError as e:
        raise click.ClickException(f"無法取得歷史資料: {e}")

    click.echo(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))


@cli.command()
def seasons():
    """列出季節因子表"""
    for month, factor in sorted(seasonal_factors().items()):
        click.echo(
            f"{month:>2}  {factor.season_name:<18} "
            f"temp {factor.temp_offset:+.1f}°C  "
            f"precip x{factor.precip_multiplier:.2f}  "
            f"humidity x{factor.humidity_multiplier:.2f}"
        )


@cli.command()
def calibrations():
    """列出溫度校正表"""
    for entry in calibration_entries():
        click.echo(
            f"{entry.name:<24} ({entry.lat:.4f}, {entry.lon:.4f}) "
            f"month {entry.month:>2}  max {entry.temp_max:.1f}°C  "
            f"min {entry.temp_min:.1f}°C  r={entry.radius}°"
        )


if __name__ == "__main__":
    cli()
