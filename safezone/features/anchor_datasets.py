"""
Curated anchor dataset loading for SafeZone.

This module loads city, forest and restricted-area anchors from
.csv or .xlsx files so the classifier can be pointed at a custom
region. Rows keep file order, which is the registration order the
classifier uses for tie-breaking.

Expected columns: name, lat, lon (or lng), state, description.
"""

import os
import csv
from typing import Any, Dict, List, Optional, Sequence
import openpyxl
from safezone.core.classifier import ZoneClassifier
from safezone.core.errors import DatasetError
from safezone.core.models import CityAnchor, GeoPoint, NamedArea, RegionBounds
from safezone.core.regions import FOREST_ZONES, NORTHEAST_CITIES, RESTRICTED_ZONES
from safezone.common.geo import validate_coordinates, within_bounds
from safezone.settings import Settings
from safezone.observability.logging_setup import get_logger

log = get_logger("safezone.datasets")

AnchorRow = Dict[str, Any]

DATASET_NAMES = ("cities", "forests", "restricted")
SUPPORTED_EXTENSIONS = (".csv", ".xlsx")

_LON_COLUMNS = ("lon", "lng", "longitude")
_LAT_COLUMNS = ("lat", "latitude")

def _pick(idx: Dict[str, int], candidates: Sequence[str]) -> Optional[str]:
    for c in candidates:
        if c in idx:
            return c
    return None

def _read_table(path: str) -> List[Dict[str, Any]]:
    """파일을 {헤더: 값} 행 목록으로 읽습니다 (헤더는 소문자)."""
    ext = os.path.splitext(path)[1].lower()

    if ext == ".csv":
        with open(path, newline="", encoding="utf-8") as f:
            return [{(k or "").strip().lower(): v for k, v in r.items()} for r in csv.DictReader(f)]

    if ext == ".xlsx":
        wb = openpyxl.load_workbook(path, data_only=True, read_only=True)
        try:
            ws = wb.active
            rows = ws.iter_rows(values_only=True)
            header = next(rows, None)
            if header is None:
                return []
            headers = [str(h or "").strip().lower() for h in header]
            return [dict(zip(headers, row)) for row in rows]
        finally:
            wb.close()

    raise DatasetError(f"지원하지 않는 파일 형식: {path}")

def load_anchor_rows(path: str, bounds: RegionBounds) -> List[AnchorRow]:
    """
    기준점 파일을 로드합니다.

    좌표가 비어 있거나 변환할 수 없거나 관할 구역을 벗어난 행은
    경고 후 건너뜁니다.

    Args:
        path: .csv 또는 .xlsx 파일 경로
        bounds: 관할 구역 경계

    Returns:
        파일 순서대로 정리된 행 목록 (name, state, lat, lon, description)

    Raises:
        DatasetError: 파일 형식, 필수 컬럼, 유효 행 없음
    """
    try:
        table = _read_table(path)
    except OSError as e:
        raise DatasetError(f"기준점 파일을 열 수 없습니다: {path} ({e})") from e

    idx = {h: i for i, h in enumerate(table[0].keys())} if table else {}
    lat_col = _pick(idx, _LAT_COLUMNS)
    lon_col = _pick(idx, _LON_COLUMNS)
    if table and ("name" not in idx or lat_col is None or lon_col is None):
        raise DatasetError(f"필수 컬럼(name, lat, lon)을 찾을 수 없습니다: {path}. 사용 가능한 컬럼: {list(idx.keys())}")

    rows: List[AnchorRow] = []
    for row_num, r in enumerate(table, start=2):
        name = str(r.get("name") or "").strip()
        if not name:
            continue

        try:
            lat = float(r[lat_col])
            lon = float(r[lon_col])
        except (ValueError, TypeError):
            log.warning(f"행 {row_num} 위도/경도 변환 실패: lat={r.get(lat_col)}, lon={r.get(lon_col)}")
            continue

        if not validate_coordinates(lat, lon):
            log.warning(f"행 {row_num} 잘못된 좌표: lat={lat}, lon={lon}")
            continue

        if not within_bounds(lat, lon, north=bounds.north, south=bounds.south,
                             east=bounds.east, west=bounds.west):
            log.warning(f"행 {row_num} 좌표가 {bounds.name} 범위를 벗어남: lat={lat}, lon={lon}")
            continue

        rows.append({
            "name": name,
            "state": str(r.get("state") or "").strip(),
            "lat": lat,
            "lon": lon,
            "description": str(r.get("description") or "").strip(),
        })

    if not rows:
        raise DatasetError(f"유효한 기준점이 없습니다: {path}")

    log.info(f"기준점 데이터 로드됨 path:{path} count:{len(rows)}")
    return rows

def load_cities(path: str, bounds: RegionBounds) -> List[CityAnchor]:
    return [
        CityAnchor(name=r["name"], state=r["state"], anchor=GeoPoint(latitude=r["lat"], longitude=r["lon"]))
        for r in load_anchor_rows(path, bounds)
    ]

def load_areas(path: str, bounds: RegionBounds) -> List[NamedArea]:
    return [
        NamedArea(name=r["name"], state=r["state"], description=r["description"],
                  anchor=GeoPoint(latitude=r["lat"], longitude=r["lon"]))
        for r in load_anchor_rows(path, bounds)
    ]

def find_dataset_file(dataset_dir: str, name: str) -> Optional[str]:
    """디렉터리에서 name.csv 또는 name.xlsx를 찾습니다."""
    for ext in SUPPORTED_EXTENSIONS:
        path = os.path.join(dataset_dir, name + ext)
        if os.path.isfile(path):
            return path
    return None

def build_classifier(settings: Settings) -> ZoneClassifier:
    """
    설정으로 구역 분류기를 만듭니다.

    dataset_dir에 파일이 있으면 해당 데이터셋을 사용하고,
    없으면 내장 Northeast India 데이터셋을 사용합니다.

    Args:
        settings: 애플리케이션 설정

    Returns:
        구역 분류기
    """
    region = settings.region
    bounds = RegionBounds(north=region.north, south=region.south,
                          east=region.east, west=region.west, name=region.name)

    cities: Sequence[CityAnchor] = NORTHEAST_CITIES
    forests: Sequence[NamedArea] = FOREST_ZONES
    restricted: Sequence[NamedArea] = RESTRICTED_ZONES

    if region.dataset_dir:
        path = find_dataset_file(region.dataset_dir, "cities")
        if path:
            cities = load_cities(path, bounds)
        path = find_dataset_file(region.dataset_dir, "forests")
        if path:
            forests = load_areas(path, bounds)
        path = find_dataset_file(region.dataset_dir, "restricted")
        if path:
            restricted = load_areas(path, bounds)

    c = settings.classifier
    log.info(f"구역 분류기 구성 region:{bounds.name} cities:{len(cities)} forests:{len(forests)} restricted:{len(restricted)}")
    return ZoneClassifier(
        bounds, restricted, forests, cities,
        restricted_radius_km=c.restricted_radius_km,
        forest_radius_km=c.forest_radius_km,
        city_radius_km=c.city_radius_km,
        moderate_radius_km=c.moderate_radius_km,
    )
