from .BeachlineVT import Voronoi,BeachLine,EventQueue,Edge,Polygon,Site,Arc,Breakpoint,CircleEvent,compute
from .geometry import breakpointX,arcY,lineIntersection,edgeIntersection
