"""
統一例外クラス定義
"""


class FileProcessingError(Exception):
    """ファイル入出力関連のエラー"""
    pass


class DataValidationError(Exception):
    """データ検証関連のエラー"""
    pass


class ConfigurationError(Exception):
    """設定関連のエラー"""
    pass


class EncodingDetectionError(FileProcessingError):
    """エンコーディング検出関連のエラー"""
    pass
