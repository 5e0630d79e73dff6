"""
Indicator Engine Service Interface

Defines the contract for the technical analysis layer.
"""

from abc import abstractmethod
from typing import Iterable, Optional

from techscore.services.base import BaseService
from techscore.schemas.analysis import AnalysisResult
from techscore.schemas.market import SymbolSeries


class IndicatorServiceInterface(BaseService[list[SymbolSeries], dict[str, AnalysisResult]]):
    """
    Indicator Engine Service Contract.

    INPUT: list[SymbolSeries]
        - symbol, daily bars and optional latest quote

    OUTPUT: dict[str, AnalysisResult]
        - Key: symbol name
        - Value: indicators, summary and composite score
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    @abstractmethod
    async def execute(self, input_data: list[SymbolSeries]) -> dict[str, AnalysisResult]:
        """Analyze every symbol in the batch."""
        pass

    @abstractmethod
    def calculate_for_symbol(
        self,
        symbol: str,
        rows: Iterable,
        quote: Optional[float] = None,
    ) -> AnalysisResult:
        """
        Analyze a single symbol.

        Args:
            symbol: Ticker symbol
            rows: Raw daily bars (PriceBar or mappings), any order
            quote: Latest price; falls back to the last close

        Returns:
            Complete technical analysis
        """
        pass
