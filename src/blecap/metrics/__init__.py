from .statistics_aggregator import StatisticsAggregator

__all__ = ["StatisticsAggregator"]
