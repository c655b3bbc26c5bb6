from gradeup.repositories.contracts import ContractFilters, ContractRepository, SqlContractRepository
from gradeup.repositories.scores import AthleteSearchFilters, ScoreRepository, SqlScoreRepository

__all__ = [
    "AthleteSearchFilters",
    "ContractFilters",
    "ContractRepository",
    "ScoreRepository",
    "SqlContractRepository",
    "SqlScoreRepository",
]
