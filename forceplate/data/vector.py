"""Three-axis force vector value type."""
import math
from dataclasses import dataclass

from ..errors import DivisionByZero


@dataclass(frozen=True)
class ForceVector:
    """Immutable 3D vector: x medial-lateral, y anterior-posterior, z vertical.

    Also used for platform-relative 2D points (centre of pressure) with z = 0.
    All operations return new vectors.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def zero(cls) -> "ForceVector":
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def vertical(cls, force: float) -> "ForceVector":
        return cls(0.0, 0.0, float(force))

    @classmethod
    def horizontal(cls, x: float, y: float) -> "ForceVector":
        return cls(float(x), float(y), 0.0)

    def add(self, other: "ForceVector") -> "ForceVector":
        return ForceVector(self.x + other.x, self.y + other.y, self.z + other.z)

    def subtract(self, other: "ForceVector") -> "ForceVector":
        return ForceVector(self.x - other.x, self.y - other.y, self.z - other.z)

    def scale(self, factor: float) -> "ForceVector":
        return ForceVector(self.x * factor, self.y * factor, self.z * factor)

    def divide(self, scalar: float) -> "ForceVector":
        """Divide each component by scalar.

        Raises:
            DivisionByZero: If scalar is 0.
        """
        if scalar == 0:
            raise DivisionByZero("Cannot divide a force vector by zero")
        return ForceVector(self.x / scalar, self.y / scalar, self.z / scalar)

    def __add__(self, other: "ForceVector") -> "ForceVector":
        return self.add(other)

    def __sub__(self, other: "ForceVector") -> "ForceVector":
        return self.subtract(other)

    def __mul__(self, factor: float) -> "ForceVector":
        return self.scale(factor)

    def __rmul__(self, factor: float) -> "ForceVector":
        return self.scale(factor)

    def __truediv__(self, scalar: float) -> "ForceVector":
        return self.divide(scalar)

    def __neg__(self) -> "ForceVector":
        return ForceVector(-self.x, -self.y, -self.z)

    def magnitude(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def horizontal_magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    def normalize(self) -> "ForceVector":
        """Unit vector in the same direction; the zero vector normalizes to itself."""
        mag = self.magnitude()
        if mag == 0:
            return ForceVector.zero()
        return self.divide(mag)

    def dot(self, other: "ForceVector") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: "ForceVector") -> "ForceVector":
        return ForceVector(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def angle(self) -> float:
        """Angle of the xy projection in radians, atan2(y, x)."""
        return math.atan2(self.y, self.x)

    def angle_degrees(self) -> float:
        return math.degrees(self.angle())
