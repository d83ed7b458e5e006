"""powercast：歷史同日氣候統計預報"""

__version__ = "0.1.0"
