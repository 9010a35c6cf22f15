from evoloom.utils.logger_setup import setup_logger
from evoloom.utils.numbers import ConstantGenerator, NumberGenerator, UniformGenerator
from evoloom.utils.rng import RandomSource, create_random_source
