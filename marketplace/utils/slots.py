# marketplace/utils/slots.py
from datetime import date, datetime, time, timedelta
from typing import Dict, Iterable, List, Tuple


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """回傳 [當天 00:00, 隔天 00:00)"""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def intervals_overlap(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """[a_start, a_end) 與 [b_start, b_end) 是否重疊 (端點相接不算重疊)"""
    return a_start < b_end and b_start < a_end


def build_day_slots(
    day: date,
    start_hour: int = 8,
    end_hour: int = 18,
    slot_minutes: int = 60,
) -> List[Tuple[datetime, datetime]]:
    """把營業時間切成連續、等長的時段；放不下一整個時段的尾巴捨棄"""
    if not 0 <= start_hour < end_hour <= 24:
        raise ValueError(f"Invalid working hours: {start_hour}-{end_hour}")
    if slot_minutes <= 0:
        raise ValueError(f"Invalid slot length: {slot_minutes}")

    day_start, _ = day_bounds(day)
    window_start = day_start + timedelta(hours=start_hour)
    window_end = day_start + timedelta(hours=end_hour)
    step = timedelta(minutes=slot_minutes)

    slots = []
    slot_start = window_start
    while slot_start + step <= window_end:
        slots.append((slot_start, slot_start + step))
        slot_start += step
    return slots


def compute_available_slots(
    day: date,
    booked: Iterable[Tuple[datetime, datetime]],
    start_hour: int = 8,
    end_hour: int = 18,
    slot_minutes: int = 60,
) -> List[Dict[str, datetime]]:
    """
    計算某一天的可預約時段。
    booked 為「未取消」預約的 (開始, 結束) 區間；和任何一筆重疊的時段都不可預約。
    結果依時間先後排序。
    """
    booked = list(booked)
    available = []
    for slot_start, slot_end in build_day_slots(day, start_hour, end_hour, slot_minutes):
        if any(intervals_overlap(slot_start, slot_end, b_start, b_end) for b_start, b_end in booked):
            continue
        available.append({"start_time": slot_start, "end_time": slot_end})
    return available
