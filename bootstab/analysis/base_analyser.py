"""Base analyzer class for all analysis components."""

from abc import ABC, abstractmethod
from typing import Any


class BaseAnalyser(ABC):
    """Abstract base class for analysis components.

    All analyzers must:
    1. Receive their inputs (a ``DatasetView``, a ``BootstrapEnsemble``, fitted
       models) in the constructor
    2. Implement fit() to perform the computation and return self for chaining
    3. Implement result() to return a frozen dataclass with results

    Analyzers are pure computation; figures are produced by functions in
    ``bootstab.plotting`` that accept the result dataclasses.

    ```python
    @dataclass(frozen=True)
    class MyResult:
        table: pd.DataFrame

    class MyAnalyzer(BaseAnalyser):
        def __init__(self, ensemble: BootstrapEnsemble):
            self._ensemble = ensemble
            self._result: MyResult | None = None

        def fit(self) -> "MyAnalyzer":
            self._result = MyResult(table=...)
            return self

        def result(self) -> MyResult:
            if self._result is None:
                raise ValueError("Call fit() first")
            return self._result
    ```
    """

    @abstractmethod
    def fit(self) -> "BaseAnalyser":
        """Run the analysis.

        Returns:
            Self for method chaining.
        """
        ...

    @abstractmethod
    def result(self) -> Any:
        """Return analysis results as a frozen dataclass instance.

        Raises:
            ValueError: If fit() has not been called yet.
        """
        ...
