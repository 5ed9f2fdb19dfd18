'''
Registry of constraint backends
'''

# pylint: disable=unused-import
from smt.backends import int_backend  # @UnusedImport
from smt.backends import bv_backend  # @UnusedImport
# pylint: enable=unused-import


class ConstraintBackendFactory:
    def __init__(self):
        from smt.backend_base import ConstraintBackend

        base_classes = [ConstraintBackend]
        self.backends = {}
        while base_classes:
            # pylint: disable=no-member
            new_classes = {cls.get_backend_type(): cls
                           for base_class in base_classes
                           for cls in base_class.__subclasses__()}
            base_classes = list(new_classes.values())

            if None in new_classes:
                del new_classes[None]
            self.backends.update(new_classes)

    @property
    def backend_types(self):
        return sorted(self.backends)

    def create(self, backend_type, **options):
        '''
        Creates a fresh backend instance

        :param backend_type: "int" or "bv"
        :param options: keyword arguments of the backend constructor
        '''
        return self.backends[backend_type](**options)
