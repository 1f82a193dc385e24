# marketplace/schemas/search_schema.py
import enum
from pydantic import BaseModel, Field
from typing import Optional

from marketplace.schemas.user_schema import UserOut
from marketplace.schemas.profile_schema import FreelancerProfileOut

class SortByEnum(str, enum.Enum):
    rating = "rating"
    price_asc = "price_asc"
    price_desc = "price_desc"
    distance = "distance"

class SearchCriteria(BaseModel):
    """
    搜尋工作者的條件。所有欄位皆可選，未提供 = 不篩選。
    - 不同欄位之間為 AND；query 在 名稱 / 職稱 / 技能 之間為 OR
    - min_price / max_price / min_rating / max_distance 皆為「含」邊界
    - latitude / longitude 是搜尋者的位置，只用來計算距離
    """
    query: Optional[str] = None
    category: Optional[str] = None
    location: Optional[str] = None
    min_price: Optional[int] = Field(None, ge=0)
    max_price: Optional[int] = Field(None, ge=0)
    min_rating: Optional[float] = Field(None, ge=0, le=5)
    max_distance: Optional[float] = Field(None, ge=0)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    sort_by: Optional[SortByEnum] = None

class FreelancerResult(BaseModel):
    user: UserOut
    profile: FreelancerProfileOut
    avg_rating: float
    review_count: int
    distance: Optional[float] = None
