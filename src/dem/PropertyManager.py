from dataclasses import dataclass, fields

from src.utils.Exceptions import ConfigurationError


@dataclass
class ContactProperty:
    Kn: float = 0.
    Kt: float = 0.
    Gn: float = 0.
    Gt: float = 0.
    Mu: float = 0.
    Bn: float = 0.
    Bt: float = 0.
    Bm: float = 0.
    Eps: float = 0.

    @classmethod
    def names(cls):
        return [f.name for f in fields(cls)]

    def update(self, **kwargs):
        for name, value in kwargs.items():
            if name not in self.names():
                raise ConfigurationError(f"Invalid Keyword:: /ContactProperty/: {name}. Only the following {self.names()} are valid")
            setattr(self, name, float(value))

    def print_surface_info(self, tag):
        print(" Contact Properties Information ".center(71, '-'))
        print('Contact model: Linear Spring-Dashpot Model')
        print(f'Tag = {tag}')
        print('Contact normal stiffness: = ', self.Kn)
        print('Contact tangential stiffness: = ', self.Kt)
        print('Normal viscous coefficient = ', self.Gn)
        print('Tangential viscous coefficient = ', self.Gt)
        print('Friction coefficient = ', self.Mu)
        if self.Bn > 0.:
            print('Bond normal stiffness = ', self.Bn)
            print('Bond tangential stiffness = ', self.Bt)
            print('Bond bending stiffness = ', self.Bm)
            print('Bond breaking strain = ', self.Eps)
        print('\n')


class PropertyTable(object):
    """tag -> ContactProperty. Applying the table copies each bundle by value."""
    def __init__(self):
        self.props = {}

    def __len__(self):
        return len(self.props)

    def set(self, tag, **kwargs):
        bundle = self.props.setdefault(int(tag), ContactProperty())
        bundle.update(**kwargs)
        return bundle

    def get(self, tag):
        if int(tag) not in self.props:
            raise KeyError(f"KeyError: Tag {tag} has no contact property bundle!")
        return self.props[int(tag)]

    def tags(self):
        return list(self.props.keys())

    def apply(self, scene, tags=None, log=True):
        updated = 0
        for tag in (self.tags() if tags is None else tags):
            updated += scene.assign_properties(tag, self.get(tag))
            if log:
                self.get(tag).print_surface_info(tag)
        return updated
