import os
from dataclasses import dataclass, field, fields

from src.dem.generator.BodyGenerator import ParticleGenerator
from src.utils.constants import LATERAL_GRAVITY, VERTICAL_GRAVITY, WALL_HEIGHT_FACTOR
from src.utils.Exceptions import ConfigurationError, MissingInputFile
from src.utils.ObjectIO import DictIO, ObjectIO
from src.utils.RegionFunction import RegionFunction


def to_bool(value):
    if isinstance(value, str):
        if value.lower() in ("1", "true", "yes", "on"):
            return True
        if value.lower() in ("0", "false", "no", "off"):
            return False
        raise ConfigurationError(f"Keyword:: /Cohesion/ should be a boolean, got {value}")
    return bool(value)


# Order of the positional input deck; the last two lines are optional.
INPUT_KEYWORDS = [
                    ("CrossSection", str), ("ptype", str), ("test", str), ("Cohesion", to_bool), ("fraction", float),
                    ("Kn", float), ("Kt", float), ("Gn", float), ("Gt", float), ("Mu", float), ("Muw", float),
                    ("Bn", float), ("Bt", float), ("Bm", float), ("Eps", float), ("R", float), ("seed", int),
                    ("dt", float), ("dtOut", float), ("Lx", float), ("Ly", float), ("Lz", float),
                    ("scalingx", int), ("scalingy", int), ("scalingz", int), ("plane_x", int), ("plane_y", int),
                    ("rho", float), ("Tf", float), ("LateralGravity", float), ("VerticalGravity", float)
                 ]
OPTIONAL_KEYWORDS = {"LateralGravity": LATERAL_GRAVITY, "VerticalGravity": VERTICAL_GRAVITY, "WallHeightFactor": WALL_HEIGHT_FACTOR}


@dataclass(frozen=True)
class RunParameters:
    """Validated run configuration.

    ``RawKn`` and ``RawKt`` are the configured stiffnesses. The effective
    ``Kn`` and ``Kt`` are derived once here, divided by
    ``scalingx * scalingy`` so that the contact stiffness per unit area does
    not depend on the lattice resolution.
    """
    CrossSection: str
    ptype: str
    test: str
    Cohesion: bool
    fraction: float
    RawKn: float
    RawKt: float
    Gn: float
    Gt: float
    Mu: float
    Muw: float
    Bn: float
    Bt: float
    Bm: float
    Eps: float
    R: float
    seed: int
    dt: float
    dtOut: float
    Lx: float
    Ly: float
    Lz: float
    scalingx: int
    scalingy: int
    scalingz: int
    plane_x: int
    plane_y: int
    rho: float
    Tf: float
    LateralGravity: float = LATERAL_GRAVITY
    VerticalGravity: float = VERTICAL_GRAVITY
    Cf: float = WALL_HEIGHT_FACTOR
    Kn: float = field(init=False)
    Kt: float = field(init=False)

    def __post_init__(self):
        ParticleGenerator.check(self.ptype)
        RegionFunction.check_cross_section(self.CrossSection)
        for name in ("Lx", "Ly", "Lz", "R", "rho", "Tf", "dtOut"):
            if not getattr(self, name) > 0.:
                raise ConfigurationError(f"Keyword:: /{name}/ should be larger than 0, got {getattr(self, name)}")
        for name in ("scalingx", "scalingy", "scalingz", "plane_x", "plane_y"):
            if getattr(self, name) < 1:
                raise ConfigurationError(f"Keyword:: /{name}/ should be a positive integer, got {getattr(self, name)}")
        if not 0. < self.fraction <= 1.:
            raise ConfigurationError(f"Keyword:: /fraction/ should lie in (0, 1], got {self.fraction}")
        object.__setattr__(self, "Kn", self.RawKn / (self.scalingx * self.scalingy))
        object.__setattr__(self, "Kt", self.RawKt / (self.scalingx * self.scalingy))

    @property
    def footprint(self):
        return (self.Lx, self.Ly, self.Lz)

    @property
    def resolution(self):
        return (int(self.Lx * self.scalingx), int(self.Ly * self.scalingy), int(self.Lz * self.scalingz))

    @property
    def settle_gravity(self):
        return (0., 0., self.VerticalGravity)

    @property
    def flow_gravity(self):
        return (self.LateralGravity, 0., self.VerticalGravity)

    def contact_props(self):
        return {"Kn": self.Kn, "Kt": self.Kt, "Gn": self.Gn, "Gt": self.Gt, "Mu": self.Mu}

    def bulk_props(self):
        props = self.contact_props()
        if self.Cohesion:
            props.update({"Bn": self.Bn, "Bt": self.Bt, "Bm": self.Bm, "Eps": self.Eps})
        return props

    def plate_props(self):
        return {"Kn": self.Kn, "Kt": self.Kt, "Gn": self.Gn, "Gt": self.Gt, "Mu": self.Muw}

    @classmethod
    def from_dict(cls, dictionary):
        kwargs = {}
        for name, converter in INPUT_KEYWORDS:
            if name in OPTIONAL_KEYWORDS:
                value = DictIO.GetAlternative(dictionary, name, OPTIONAL_KEYWORDS[name])
            else:
                try:
                    value = DictIO.GetEssential(dictionary, name)
                except KeyError as error:
                    raise ConfigurationError(f"Keyword:: /{name}/ is missing from the input") from error
            try:
                value = converter(value)
            except (TypeError, ValueError) as error:
                raise ConfigurationError(f"Keyword:: /{name}/ cannot be read from {value!r}") from error
            kwargs["Raw" + name if name in ("Kn", "Kt") else name] = value
        kwargs["Cf"] = float(DictIO.GetAlternative(dictionary, "WallHeightFactor", WALL_HEIGHT_FACTOR))
        return cls(**kwargs)

    def print_info(self):
        print(" Run Parameters ".center(71, '-'))
        for f in fields(self):
            print((f"{f.name}: {getattr(self, f.name)}").ljust(67))
        print('\n')


def input_filename(filekey):
    for candidate in (filekey, filekey + ".inp", filekey + ".json"):
        if os.path.isfile(candidate) and os.path.splitext(candidate)[1].lower() in (".inp", ".json"):
            return candidate
    raise MissingInputFile(filekey + ".inp")


def load_parameters(filekey):
    """Read ``filekey`` (.inp preferred, .json accepted) into a validated RunParameters."""
    filename = input_filename(filekey)
    try:
        deck = ObjectIO(filename, [name for name, _ in INPUT_KEYWORDS])
    except RuntimeError as error:
        raise ConfigurationError(str(error)) from error
    return RunParameters.from_dict(deck.Object)
