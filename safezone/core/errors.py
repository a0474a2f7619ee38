"""
Error types for SafeZone.

The classifier never raises; these cover record ingestion,
dataset loading and score sweeps.
"""

class SafeZoneError(Exception):
    """SafeZone 기본 예외"""

class RecordNormalizationError(SafeZoneError):
    """원시 레코드의 좌표를 GeoPoint로 정규화할 수 없음"""

class DatasetError(SafeZoneError):
    """기준점 데이터셋 파일을 로드할 수 없음"""

class SweepError(SafeZoneError):
    """스윕용 일괄 조회가 재시도 후에도 실패함"""
