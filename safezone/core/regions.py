"""
Curated geographic datasets for SafeZone.

Northeast India jurisdiction bounds, tourist-safe city anchors,
forest reserves and restricted border areas. Restricted areas and
forests are point anchors with a fixed buffer radius, not polygons;
list order is registration order and decides ties.
"""

from typing import List
from .models import CityAnchor, GeoPoint, NamedArea, RegionBounds

# Northeast India 좌표 경계: 23°N-29°N, 88°E-97°E
NORTHEAST_BOUNDS = RegionBounds(north=29.0, south=23.0, east=97.0, west=88.0, name="Northeast India")

def _city(name: str, lat: float, lng: float, state: str) -> CityAnchor:
    return CityAnchor(name=name, anchor=GeoPoint(latitude=lat, longitude=lng), state=state)

def _area(name: str, state: str, lat: float, lng: float, description: str) -> NamedArea:
    return NamedArea(name=name, state=state, anchor=GeoPoint(latitude=lat, longitude=lng), description=description)

# 주요 도시 및 관광지
NORTHEAST_CITIES: List[CityAnchor] = [
    _city("Guwahati", 26.1445, 91.7362, "Assam"),
    _city("Shillong", 25.5788, 91.8933, "Meghalaya"),
    _city("Itanagar", 27.0844, 93.6053, "Arunachal Pradesh"),
    _city("Kohima", 25.6751, 94.1086, "Nagaland"),
    _city("Imphal", 24.8170, 93.9368, "Manipur"),
    _city("Aizawl", 23.7307, 92.7173, "Mizoram"),
    _city("Agartala", 23.8315, 91.2868, "Tripura"),
    _city("Gangtok", 27.3389, 88.6065, "Sikkim"),
    _city("Tezpur", 26.6344, 92.7933, "Assam"),
    _city("Dibrugarh", 27.4728, 94.9120, "Assam"),
    _city("Silchar", 24.8333, 92.7789, "Assam"),
    _city("Cherrapunji", 25.2747, 91.7323, "Meghalaya"),
    _city("Dawki", 25.1167, 91.7667, "Meghalaya"),
    _city("Tawang", 27.5859, 91.8716, "Arunachal Pradesh"),
    _city("Mokokchung", 26.3226, 94.5251, "Nagaland"),
    _city("Loktak Lake", 24.5500, 93.7833, "Manipur"),
    _city("Lunglei", 22.8879, 92.7345, "Mizoram"),
    _city("Udaipur", 23.5331, 91.4865, "Tripura"),
    _city("Pelling", 27.2152, 88.2426, "Sikkim"),
    _city("Namchi", 27.1651, 88.3644, "Sikkim"),
]

# 산림 보호구역 및 국립공원 (5km 버퍼)
FOREST_ZONES: List[NamedArea] = [
    _area("Kaziranga National Park", "Assam", 26.5775, 93.1717,
          "UNESCO World Heritage Site, home to one-horned rhinoceros"),
    _area("Manas National Park", "Assam", 26.7044, 90.9127,
          "UNESCO World Heritage Site and Tiger Reserve"),
    _area("Nameri National Park", "Assam", 26.9333, 92.8500,
          "Tiger Reserve with diverse wildlife"),
    _area("Dibru-Saikhowa National Park", "Assam", 27.5833, 95.1833,
          "Wetland ecosystem with feral horses"),
    _area("Balphakram National Park", "Meghalaya", 25.2000, 90.9333,
          "Land of perpetual winds"),
    _area("Nokrek National Park", "Meghalaya", 25.5000, 90.2000,
          "Biosphere reserve with wild citrus fruits"),
    _area("Namdapha National Park", "Arunachal Pradesh", 27.5000, 96.3500,
          "Largest protected area in Northeast India"),
    _area("Mouling National Park", "Arunachal Pradesh", 28.3000, 95.1500,
          "Important bird area with rare species"),
    _area("Intanki National Park", "Nagaland", 25.5667, 93.9833,
          "Hornbill habitat and tribal conservation area"),
    _area("Keibul Lamjao National Park", "Manipur", 24.5167, 93.8167,
          "Floating national park, home to Sangai deer"),
    _area("Murlen National Park", "Mizoram", 23.7000, 93.2833,
          "Montane forest ecosystem"),
    _area("Phawngpui Blue Mountain National Park", "Mizoram", 22.6167, 93.0167,
          "Highest peak in Mizoram"),
    _area("Clouded Leopard National Park", "Tripura", 23.8000, 91.4167,
          "Home to clouded leopards and primates"),
    _area("Bison National Park", "Tripura", 23.7500, 91.4500,
          "Gaur (Indian bison) habitat"),
    _area("Khangchendzonga National Park", "Sikkim", 27.7000, 88.1500,
          "UNESCO World Heritage Site around Mt. Kanchenjunga"),
]

# 국경 및 제한구역 (10km 버퍼)
RESTRICTED_ZONES: List[NamedArea] = [
    _area("China Border - Arunachal Pradesh", "Arunachal Pradesh", 28.2180, 94.7278,
          "International border area requiring special permits"),
    # 큐레이션 목록 외 추가 지점 (Upper Subansiri LAC 구간, 위 기준점에서 약 77km)
    _area("China Border - Upper Subansiri", "Arunachal Pradesh", 28.4950, 94.0100,
          "Line of Actual Control near Taksing, Protected Area Permit required"),
    _area("China Border - Sikkim", "Sikkim", 27.3914, 88.8414,
          "Nathu La Pass and surrounding border areas"),
    _area("Myanmar Border - Nagaland", "Nagaland", 26.1584, 95.1376,
          "International border with Myanmar"),
    _area("Myanmar Border - Manipur", "Manipur", 24.4825, 94.1086,
          "Moreh border crossing and surrounding areas"),
    _area("Myanmar Border - Mizoram", "Mizoram", 23.1645, 93.2990,
          "International border with Myanmar"),
    _area("Bangladesh Border - Meghalaya", "Meghalaya", 25.1167, 91.7667,
          "Dawki border and surrounding areas"),
    _area("Bangladesh Border - Tripura", "Tripura", 23.8315, 91.2868,
          "Agartala border and surrounding areas"),
    _area("Bangladesh Border - Assam", "Assam", 24.8000, 89.9000,
          "International border areas"),
]
