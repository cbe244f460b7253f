"""
Minimal complex arithmetic for polynomial evaluation on the imaginary axis.
"""

from dataclasses import dataclass
import math

from control_workbench.core.errors import InvalidParameter, NumericDegenerate


@dataclass(frozen=True)
class ComplexNumber:
    """Immutable (real, imag) pair."""
    real: float = 0.0
    imag: float = 0.0

    def __add__(self, other: 'ComplexNumber') -> 'ComplexNumber':
        return ComplexNumber(self.real + other.real, self.imag + other.imag)

    def __mul__(self, other: 'ComplexNumber') -> 'ComplexNumber':
        return ComplexNumber(
            self.real * other.real - self.imag * other.imag,
            self.real * other.imag + self.imag * other.real
        )

    def scale(self, factor: float) -> 'ComplexNumber':
        """Multiply by a real scalar."""
        return ComplexNumber(self.real * factor, self.imag * factor)

    def conjugate(self) -> 'ComplexNumber':
        return ComplexNumber(self.real, -self.imag)

    def power(self, exponent: int) -> 'ComplexNumber':
        """
        Raise to a non-negative integer power by repeated multiplication.

        Args:
            exponent: Power (>= 0); power 0 yields (1, 0)

        Returns:
            self ** exponent
        """
        if exponent < 0:
            raise InvalidParameter(f"exponent must be non-negative, got {exponent}")

        result = ComplexNumber(1.0, 0.0)
        for _ in range(exponent):
            result = result * self
        return result

    def divide(self, other: 'ComplexNumber') -> 'ComplexNumber':
        """
        Complex division via multiplication by the conjugate.

        Raises:
            NumericDegenerate: If the divisor has zero magnitude
        """
        denominator = other.magnitude_squared
        if denominator == 0:
            raise NumericDegenerate("division by a complex number of zero magnitude")
        numerator = self * other.conjugate()
        return ComplexNumber(numerator.real / denominator, numerator.imag / denominator)

    @property
    def magnitude_squared(self) -> float:
        return self.real * self.real + self.imag * self.imag

    @property
    def magnitude(self) -> float:
        return math.hypot(self.real, self.imag)

    @property
    def argument(self) -> float:
        """Angle in radians, in (-pi, pi]."""
        return math.atan2(self.imag, self.real)

    def to_complex(self) -> complex:
        return complex(self.real, self.imag)

    def __str__(self) -> str:
        sign = '+' if self.imag >= 0 else '-'
        return f"{self.real:.6g} {sign} {abs(self.imag):.6g}j"
