# marketplace/core/config.py
# 應用程式設定 (資料庫連線字串、JWT 秘鑰、排程與通知參數)
from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # 資料庫設定
    DATABASE_URL: str
    DB_ECHO: bool = False
    # 啟動時自動建立資料表 (開發用)
    CREATE_TABLES: bool = False

    # JWT 設定
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    # 存取令牌過期時間（分鐘）
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # 預約時段：每日營業時間 (24 小時制) 與每個時段長度
    WORK_DAY_START_HOUR: int = 8
    WORK_DAY_END_HOUR: int = 18
    SLOT_MINUTES: int = 60

    # 每條 WebSocket 連線最多暫存的待送通知數，超過即丟棄
    NOTIFICATION_QUEUE_SIZE: int = 100

    CORS_ORIGINS: List[str] = ["*"]

    # 環境變數檔案
    class Config:
        env_file = ".env"

# 建立設定實例
settings = Settings()
