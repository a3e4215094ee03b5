################################################################################
#Geometry kernels of the beach line
#The scalar kernels are compiled with numba. They return nan for degenerate
#input, the wrappers below turn that into None.
################################################################################
import numpy as np
from numba import njit

@njit
def CalBreakpointX(lx,ly,rx,ry,y0):
	#x of the crossing point of two neighboring parabolas (foci (lx,ly) on the left, (rx,ry) on the right, directrix y=y0)
	#Each parabola is reduced to a*x^2+b*x+c and the two are subtracted.
	if ly==ry: return (lx+rx)/2.
	#a focus on the sweep line makes a vertical ray
	if ly==y0: return lx
	if ry==y0: return rx
	dp = 2.*(ly-y0)
	a1 = 1./dp
	b1 = -2.*lx/dp
	c1 = y0+dp/4.+lx*lx/dp
	dp = 2.*(ry-y0)
	a2 = 1./dp
	b2 = -2.*rx/dp
	c2 = y0+dp/4.+rx*rx/dp
	a = a1-a2
	b = b1-b2
	c = c1-c2
	disc = b*b-4.*a*c
	if disc<0.: disc = 0. #rounding
	x1 = (-b+np.sqrt(disc))/(2.*a)
	x2 = (-b-np.sqrt(disc))/(2.*a)
	#the higher site has the flatter parabola, which wins far from its focus
	if ly<ry: return max(x1,x2)
	else: return min(x1,x2)

@njit
def CalArcY(sx,sy,x,y0):
	dp = 2.*(sy-y0)
	if dp==0.: return np.nan
	b1 = -2.*sx/dp
	c1 = y0+dp/4.+sx*sx/dp
	return x*x/dp+b1*x+c1

@njit
def CalLineIntersect(a1x,a1y,a2x,a2y,b1x,b1y,b2x,b2y):
	dax = a1x-a2x
	dbx = b1x-b2x
	day = a1y-a2y
	dby = b1y-b2y
	det = dax*dby-day*dbx
	if det==0.: return np.nan,np.nan #parallel
	a = a1x*a2y-a1y*a2x
	b = b1x*b2y-b1y*b2x
	return (a*dbx-dax*b)/det,(a*dby-day*b)/det

def breakpointX(left,right,y0):
	return CalBreakpointX(float(left[0]),float(left[1]),float(right[0]),float(right[1]),float(y0))

def arcY(site,x,y0):
	"""
	y of the parabola with focus site and directrix y=y0, at x.
	nan if the site is on the directrix.
	"""
	return CalArcY(float(site[0]),float(site[1]),float(x),float(y0))

def lineIntersection(a1,a2,b1,b2):
	"""
	Intersection of the line through a1,a2 and the line through b1,b2.
	None if they are parallel.
	"""
	x,y = CalLineIntersect(float(a1[0]),float(a1[1]),float(a2[0]),float(a2[1]),float(b1[0]),float(b1[1]),float(b2[0]),float(b2[1]))
	if np.isnan(x): return None
	return x,y

def edgeIntersection(a,b):
	"""
	Intersection of two edges taken as rays from their start points.
	None if the lines are parallel or the crossing is behind either start.
	"""
	i = lineIntersection(a.start,a.B,b.start,b.B)
	if i is None: return None
	if (i[0]-a.start[0])*a.direction[0]<0 or (i[1]-a.start[1])*a.direction[1]<0 \
	or (i[0]-b.start[0])*b.direction[0]<0 or (i[1]-b.start[1])*b.direction[1]<0:
		return None #wrong direction
	return i
