from __future__ import annotations
import math
from typing import Literal, Union
from typing_extensions import Annotated
from pydantic import BaseModel, Field

# Areas of effect, measured in feet. floor_area() is the lateral area the
# figure covers in its default orientation.

class Line(BaseModel):
    shape: Literal["line"] = "line"
    length: float = Field(ge=0)
    width: float = Field(5.0, ge=0)
    def floor_area(self) -> float: return self.length * self.width

class Cylinder(BaseModel):
    shape: Literal["cylinder"] = "cylinder"
    height: float = Field(ge=0)
    radius: float = Field(ge=0)
    def floor_area(self) -> float: return math.pi * self.radius * self.radius

class Sphere(BaseModel):
    shape: Literal["sphere"] = "sphere"
    radius: float = Field(ge=0)
    def floor_area(self) -> float: return math.pi * self.radius * self.radius

class Cone(BaseModel):
    shape: Literal["cone"] = "cone"
    length: float = Field(ge=0)
    def floor_area(self) -> float: return 0.5 * math.sqrt(3.0) * self.length * self.length

class Cube(BaseModel):
    shape: Literal["cube"] = "cube"
    length: float = Field(ge=0)
    def floor_area(self) -> float: return self.length * self.length

Area = Annotated[Union[Line, Cylinder, Sphere, Cone, Cube], Field(discriminator="shape")]
