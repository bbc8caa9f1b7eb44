from hyperanf.errors import EdgeListError, GraphError, HyperANFError, IncompatibleSketchError
from hyperanf.graph import AdjacencyIndex
from hyperanf.hyperanf import HyperANF, Round, neighbourhood_function
from hyperanf.sketch import Sketch
from hyperanf.stats import average_distance, effective_diameter
from hyperanf.table import SketchTable
