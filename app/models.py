from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class StatsItem(BaseModel):
  date: Optional[str] = None
  slug: str
  cnHeroId: Optional[str] = None
  rank: str
  lane: str
  position: Optional[int] = None
  winRate: Optional[float] = None
  pickRate: Optional[float] = None
  banRate: Optional[float] = None
  strengthLevel: Optional[int] = None


class HistoryFilters(BaseModel):
  slug: Optional[str] = None
  rank: Optional[List[str]] = None
  lane: Optional[List[str]] = None
  from_: Optional[str] = Field(default=None, alias="from")
  to: Optional[str] = None
  latest: bool = False

  model_config = {"populate_by_name": True}


class HistoryResponse(BaseModel):
  filters: HistoryFilters
  count: int
  items: List[StatsItem] = []


class LeaderboardEntry(StatsItem):
  displayName: str
  icon: Optional[str] = None


class TierFilters(BaseModel):
  rank: Optional[str] = None
  lane: Optional[str] = None
  date: Optional[str] = None
  lang: str


class TierListResponse(BaseModel):
  filters: TierFilters
  tiersOrder: List[str]
  tiers: Dict[str, List[LeaderboardEntry]]


class BulkFilters(BaseModel):
  rank: Optional[List[str]] = None
  lane: Optional[List[str]] = None
  date: Optional[str] = None
  lang: str


class RankLaneTiers(BaseModel):
  rank: str
  lane: str
  tiers: Dict[str, List[LeaderboardEntry]]


class BulkTierListResponse(BaseModel):
  filters: BulkFilters
  tiersOrder: List[str]
  tiersByRankLane: Dict[str, RankLaneTiers] = {}


class ChampionIds(BaseModel):
  slug: str
  cnHeroId: Optional[str] = None


class ChampionOut(BaseModel):
  slug: str
  name: Optional[str] = None
  nameLocalizations: Dict[str, Any] = {}
  roles: List[str] = []
  rolesLocalized: List[Any] = []
  difficulty: Optional[str] = None
  difficultyLocalized: Any = None
  icon: Optional[str] = None
  ids: ChampionIds


class QuizAttemptIn(BaseModel):
  # malformed numbers are stored as null
  correct: Any = None
  total: Any = None
  percent: Any = None


class WebappOpenIn(BaseModel):
  tgId: Any = None
  username: Any = None
  firstName: Any = None
  lastName: Any = None
