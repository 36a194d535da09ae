"""
MCVI Planning Library

Online, anytime Monte Carlo Value Iteration for partially observable
decision processes: a belief/action search tree refined by gap-driven
branch-and-bound search, producing a policy graph (finite-state
controller) as it goes.

Modules:
- Models: Model contract, tabular POMDPs and value bound estimators
- Propagators: Belief representations (ParticleBelief)
- PolicyGraph: Controller nodes, rollouts and Monte Carlo backups
- Solver: Search tree, gap-driven search and the MCVI driver loop
- MonteCarlo: Policy evaluation by simulation
- CaseStudies: Example applications (Tiger, stop-or-wait toy)
"""

from . import Models
from . import Propagators
from . import PolicyGraph
from . import Solver
from . import MonteCarlo
from . import CaseStudies

__all__ = ['Models', 'Propagators', 'PolicyGraph', 'Solver', 'MonteCarlo', 'CaseStudies']
__version__ = '0.1.0'
