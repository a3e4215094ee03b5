#!/usr/bin/env python
################################################################################
#Voronoi Tessellation with Fortune's sweep line algorithm
#The beach line is a binary tree: arcs are the leaves, breakpoints the
#internal nodes. The sweep line moves from the top (max y) to the bottom.
################################################################################
import numpy as np
import heapq,json
import itertools
import time,sys,warnings
from tqdm import tqdm
from .geometry import breakpointX,arcY,edgeIntersection
_showwarning=warnings.showwarning
def _ltshowwarning(message, category, filename, lineno, file=None, line=None):
	if category==UserWarning: print('\033[33mWARNING\033[0m:',message,file=sys.stderr)
	else: _showwarning(message, category, filename, lineno, file, line)
warnings.showwarning=_ltshowwarning
color = lambda s,ncolor,nfont: "\033["+str(nfont)+";"+str(ncolor)+"m"+s+"\033[0;0m"

class Site(tuple):
	#an input point (x,y), owning one cell
	def __new__(cls,x,y,index=None):
		self = tuple.__new__(cls,(float(x),float(y)))
		self.index = index
		self.cell = Polygon()
		return self

class Polygon(object):
	"""
	Vertices of one Voronoi cell in boundary order.
	The loop is not closed: last connects back to first.
	"""
	def __init__(self):
		self.vertices = []
		self.first = None
		self.last = None
	def __len__(self):
		return len(self.vertices)
	def __str__(self):
		return 'Polygon'+str(self.vertices)
	def addRight(self,p):
		self.vertices.append(p)
		self.last = p
		if len(self.vertices)==1: self.first = p
	def addLeft(self,p):
		self.vertices.insert(0,p)
		self.first = p
		if len(self.vertices)==1: self.last = p
	def toarray(self):
		return np.array(self.vertices,dtype=np.float64).reshape(len(self.vertices),2)

class Edge(object):
	def __init__(self,start,left,right):
		#start: fixed point on the bisector of the sites left and right
		self.start = start
		self.end = None
		self.left = left
		self.right = right
		self.neighbour = None #the other half of the same bisector line
		self.direction = (right[1]-left[1],-(right[0]-left[0]))
		self.B = (start[0]+self.direction[0],start[1]+self.direction[1]) #second point of the line
		if left[1]!=right[1]:
			self.f = (right[0]-left[0])/(left[1]-right[1])
			self.g = start[1]-self.f*start[0]
		else: #vertical, y=f*x+g is useless
			self.f = np.inf
			self.g = np.nan
	def __str__(self):
		return 'l:'+str(self.left)+' r:'+str(self.right)+' s:'+str(self.start)+' e:'+str(self.end)+' dir:'+str(self.direction)

class Arc(object):
	isLeaf = True
	def __init__(self,site):
		self.site = site
		self.parent = None
		self.event = None #queue handle of the circle event that would remove this arc
	def __str__(self):
		return 'Arc'+str(self.site)

class Breakpoint(object):
	isLeaf = False
	def __init__(self,edge,left,right):
		self.edge = edge
		self.parent = None
		self.left = left
		self.right = right
	@property
	def left(self): return self._left
	@left.setter
	def left(self,n):
		self._left = n
		n.parent = self
	@property
	def right(self): return self._right
	@right.setter
	def right(self,n):
		self._right = n
		n.parent = self
	def __str__(self):
		return 'Breakpoint('+str(self.edge)+')'

class CircleEvent(object):
	#(x,y) is the bottom of the circle through the sites of arc and its two neighbors
	def __init__(self,x,y,arc):
		self.x = x
		self.y = y
		self.arc = arc
	def __str__(self):
		return 'CircleEvent(%g,%g) %s' % (self.x,self.y,self.arc)

class EventQueue(object):
	"""
	Heap of site and circle events. The lowest priority comes out first,
	ties come out in insertion order.
	insert returns a handle with which the event can be deleted later.
	"""
	_REMOVED = object()
	def __init__(self):
		self.heap = []
		self.counter = itertools.count(1)
		self.size = 0
	def __len__(self):
		return self.size
	def __str__(self):
		return str([e[:2] for e in self.heap if e[2] is not self._REMOVED])
	def insert(self,priority,value):
		entry = [priority,next(self.counter),value]
		heapq.heappush(self.heap,entry)
		self.size += 1
		return entry
	def delete(self,entry):
		#lazy: the entry is only marked, delMin skips it
		if entry[2] is self._REMOVED: raise KeyError('event not in queue')
		entry[2] = self._REMOVED
		self.size -= 1
	def isEmpty(self):
		return self.size==0
	def delMin(self):
		while len(self.heap)>0 and self.heap[0][2] is self._REMOVED: heapq.heappop(self.heap)
		if len(self.heap)==0: return None
		entry = heapq.heappop(self.heap)
		value = entry[2]
		entry[2] = self._REMOVED
		self.size -= 1
		return value
#END_OF_class EventQueue(object):

class BeachLine(object):
	"""
	State of one sweep: the tree of arcs, the event queue, the position of
	the sweep line, and the edges and vertices found so far.
	"""
	TieThreshold = 0.01 #the first two sites closer than this in y are taken as the same height
	def __init__(self,height):
		self.root = None
		self.Q = EventQueue()
		self.ysweep = 0
		self.height = height
		self.firstPoint = None
		self.Edges = []
		self.Vertices = [] #(vertex,(left site,vanishing site,right site))

	def __str__(self):
		s = "BeachLineStart-------------------------\n"
		for a in self.leaves():
			s += "\t"+str(a)+(' *' if a.event is not None else '')+'\n'
		s += "BeachLineEnd---------------------------"
		return s

	def leaves(self):
		#arcs from left to right
		stack = []
		n = self.root
		while stack or n is not None:
			if n is not None:
				if n.isLeaf:
					yield n
					n = None
				else:
					stack.append(n)
					n = n.left
			else:
				n = stack.pop().right

	@staticmethod
	def leftParent(n):
		#the nearest ancestor having n in its right subtree: the breakpoint on the left of n
		par = n.parent
		last = n
		while par is not None and par.left is last:
			last = par
			par = par.parent
		return par
	@staticmethod
	def rightParent(n):
		#the nearest ancestor having n in its left subtree: the breakpoint on the right of n
		par = n.parent
		last = n
		while par is not None and par.right is last:
			last = par
			par = par.parent
		return par
	@staticmethod
	def leftChild(n):
		#rightmost leaf of the left subtree
		if n is None: return None
		par = n.left
		while not par.isLeaf: par = par.right
		return par
	@staticmethod
	def rightChild(n):
		#leftmost leaf of the right subtree
		if n is None: return None
		par = n.right
		while not par.isLeaf: par = par.left
		return par

	def getXOfEdge(self,n):
		return breakpointX(self.leftChild(n).site,self.rightChild(n).site,self.ysweep)

	def locate(self,x):
		#the arc above x
		n = self.root
		while not n.isLeaf:
			if self.getXOfEdge(n)>x: n = n.left
			else: n = n.right
		return n

	def replace(self,old,new):
		par = old.parent
		if par is None:
			self.root = new
			new.parent = None
		elif par.left is old: par.left = new
		else: par.right = new

	def dropCircle(self,arc):
		if arc.event is not None:
			if Voronoi.debug: print('drop:',arc.event[2])
			self.Q.delete(arc.event)
			arc.event = None

	def insertParabola(self,p):
		if self.root is None:
			self.root = Arc(p)
			self.firstPoint = p
			return
		if self.root.isLeaf and self.root.site[1]-p[1]<self.TieThreshold:
			#the first two sites at the same height
			self.splitVertical(self.root,p)
			return

		par = self.locate(p[0])
		#the triple around par is broken
		self.dropCircle(par)
		if par.site[1]==self.ysweep:
			#par is on the sweep line too, its parabola is a vertical ray
			self.splitVertical(par,p)
			return

		start = p[0],arcY(par.site,p[0],self.ysweep)
		el = Edge(start,par.site,p)
		er = Edge(start,p,par.site)
		el.neighbour = er
		er.neighbour = el
		self.Edges.append(el)
		if Voronoi.debug: print('new:',el,'\n     ',er)
		#par is split in three: par.site p par.site
		p0 = Arc(par.site)
		p1 = Arc(p)
		p2 = Arc(par.site)
		self.replace(par,Breakpoint(er,Breakpoint(el,p0,p1),p2))
		self.checkCircle(p0)
		self.checkCircle(p2)
	#END_OF_def insertParabola(self,p):

	def splitVertical(self,par,p):
		#p and par.site have the same height: one vertical edge coming down from the top
		q = par.site
		start = (p[0]+q[0])/2.,self.height
		if p[0]>q[0]: left,right = Arc(q),Arc(p)
		else: left,right = Arc(p),Arc(q)
		n = Breakpoint(Edge(start,left.site,right.site),left,right)
		self.Edges.append(n.edge)
		if Voronoi.debug: print('new vertical:',n.edge)
		self.replace(par,n)
		self.checkCircle(left)
		self.checkCircle(right)

	def removeParabola(self,e):
		p1 = e.arc
		p1.event = None
		xl = self.leftParent(p1)
		xr = self.rightParent(p1)
		assert xl is not None and xr is not None
		p0 = self.leftChild(xl)
		p2 = self.rightChild(xr)
		self.dropCircle(p0)
		self.dropCircle(p2)

		v = e.x,arcY(p1.site,e.x,self.ysweep)
		cell = p1.site.cell
		if p0.site.cell.last is cell.first: cell.addLeft(v)
		else: cell.addRight(v)
		p0.site.cell.addRight(v)
		p2.site.cell.addLeft(v)
		self.Vertices.append((v,(p0.site,p1.site,p2.site)))

		xl.edge.end = v
		xr.edge.end = v
		#p1's parent goes away with p1, the other one now separates p0 and p2
		higher = xr if p1.parent is xl else xl
		higher.edge = Edge(v,p0.site,p2.site)
		self.Edges.append(higher.edge)
		if Voronoi.debug: print('merge:',p1,'->',v,higher.edge)

		par = p1.parent
		self.replace(par,par.right if par.left is p1 else par.left)
		self.checkCircle(p0)
		self.checkCircle(p2)
	#END_OF_def removeParabola(self,e):

	def checkCircle(self,b):
		self.dropCircle(b)
		lp = self.leftParent(b)
		rp = self.rightParent(b)
		a = self.leftChild(lp)
		c = self.rightChild(rp)
		if a is None or c is None or a.site is c.site: return
		s = edgeIntersection(lp.edge,rp.edge)
		if s is None: return
		d = np.sqrt((s[0]-a.site[0])**2+(s[1]-a.site[1])**2)
		if s[1]-d>=self.ysweep: return #already passed
		e = CircleEvent(s[0],s[1]-d,b)
		if Voronoi.debug: print('->V',e,a.site,c.site)
		b.event = self.Q.insert(-(s[1]-d),e)

	def finish(self,width,margin):
		#extend the edges still traced by breakpoints out of the box
		if self.root is None or self.root.isLeaf: return
		stack = [self.root]
		while stack:
			n = stack.pop()
			e = n.edge
			if e.direction[0]>0:
				mx = max(width,e.start[0]+margin)
				e.end = mx,e.f*mx+e.g
			elif e.direction[0]<0:
				mx = min(0.,e.start[0]-margin)
				e.end = mx,e.f*mx+e.g
			elif e.direction[1]>0:
				e.end = e.start[0],max(self.height,e.start[1]+margin)
			else:
				e.end = e.start[0],min(0.,e.start[1]-margin)
			if not n.left.isLeaf: stack.append(n.left)
			if not n.right.isLeaf: stack.append(n.right)
	#END_OF_def finish(self,width,margin):
#END_OF_class BeachLine(object):

class Voronoi(object):
	debug = False
	Margin = 10. #unbounded edges are extended at least this far beyond their start
	def __init__(self,image=None,events=None,**kwargs):
		"""
		image: a 2D array in which >0 means a site at (x,y)=index.
		events: coordinates of points, 2D array with shape (# of points, 2).
		width,height: the box [0,width]x[0,height] to which the unbounded edges are extended.
			default: just covering the points.
		Resolution: int, number of decimals to round on the input coordinates. default: no rounding.
		caladj: calculate the list of neighbors of each point.
		Silent: no status output.
		"""
		self.FileName = kwargs.pop('FileName','tmp')
		self.Silent = kwargs.pop('Silent',False)
		self.ToCalAdj = kwargs.pop('caladj',False)
		Resolution = kwargs.pop('Resolution',None)
		if image is not None:
			self.Mode='image'
			if events is not None: raise ValueError('image mode or events mode?')
			if Resolution is not None: raise ValueError('Resolution is not supported in image mode')
			image = np.asarray(image)
			if image.ndim!=2: raise ValueError('image should be 2D, got shape %s' % (image.shape,))
			Px,Py = np.where(image>0)
			events = np.vstack((Px,Py)).T.astype(np.float64)
			width = image.shape[0]-1
			height = image.shape[1]-1
		elif events is not None:
			self.Mode='event'
			events = np.array(events,dtype=np.float64)
			if events.size==0: events = events.reshape(0,2)
			if events.ndim!=2 or events.shape[1]<2: raise ValueError('events should have shape (N,2), got %s' % (events.shape,))
			if Resolution is not None: events[:,:2] = np.round(events[:,:2],Resolution)
			if len(events)>0:
				width = np.ceil(np.max(events[:,0]))+1
				height = np.ceil(np.max(events[:,1]))+1
			else: width = height = 1.
		else: raise ValueError('ERROR: image mode or events mode?')
		self.width = float(kwargs.pop('width',width))
		self.height = float(kwargs.pop('height',height))
		if kwargs: raise TypeError('unknown options: '+', '.join(kwargs))

		self.Points = [(float(x),float(y)) for x,y in events[:,:2]]
		if len(self.Points)>0 and (np.min(events[:,0])<0 or np.min(events[:,1])<0 or np.max(events[:,0])>self.width or np.max(events[:,1])>self.height):
			warnings.warn(f"points out of 0~{self.width:g}, 0~{self.height:g}")
		#duplicated points share the site (and the cell) of the first one
		self.Sites = []
		self.SiteOf = []
		found = {}
		for n,(x,y) in enumerate(self.Points):
			if (x,y) not in found:
				found[x,y] = Site(x,y,n)
				self.Sites.append(found[x,y])
			self.SiteOf.append(found[x,y])
		if len(self.Sites)<len(self.Points):
			warnings.warn(color("found %d duplicated points" % (len(self.Points)-len(self.Sites)),31,1))
		self.Cells = [s.cell for s in self.SiteOf]

		self.Edges = []
		self.Vertices = []
		self.Adj = None
		if not self.Silent:
			print(color('Voronoi Construction: '+self.FileName,34,1),end=' ')
			print(f"Points: {len(self.Points)} Box: {self.width:g} {self.height:g}")
		self.Construct()
		if self.ToCalAdj: self.CalAdj()
	#END_OF_init

	def Construct(self):
		StartTime=time.time()
		T = BeachLine(self.height)
		#sites of one height enter from left to right, so each one extends the rightmost arc of the top row
		for s in sorted(self.Sites,key=lambda s:(-s[1],s[0])): T.Q.insert(-s[1],s)
		with tqdm(total=len(self.Sites),disable=self.Silent,desc='Sweep',leave=False) as pbar:
			while not T.Q.isEmpty():
				e = T.Q.delMin()
				if isinstance(e,CircleEvent):
					T.ysweep = e.y
					if Voronoi.debug: print('CircleEvent:',e)
					T.removeParabola(e)
				else:
					T.ysweep = e[1]
					if Voronoi.debug: print('SiteEvent:',e)
					T.insertParabola(e)
					pbar.update(1)
				if Voronoi.debug: print(T)
		T.finish(self.width,self.Margin)
		#the two halves of a bisector become one edge
		for e in T.Edges:
			if e.neighbour is not None: e.start = e.neighbour.end
		self.Edges = T.Edges
		self.Vertices = T.Vertices
		if Voronoi.debug: print('time:',time.time()-StartTime)
	#END_OF_Construct()

	def getsegments(self):
		return np.array([[e.start[0],e.start[1],e.end[0],e.end[1]] for e in self.Edges],dtype=np.float64).reshape(len(self.Edges),4)

	def CalAdj(self):
		if Voronoi.debug: print(color("\nCalculating Adjacency List",32,0))
		Adj = {s.index:[] for s in self.Sites}
		for e in self.Edges:
			Adj[e.left.index].append(e.right.index)
			Adj[e.right.index].append(e.left.index)
		self.Adj = [Adj[s.index] for s in self.SiteOf]
		return self.Adj
	#END_OF_def CalAdj(self):

	def saveresults(self):
		with open(self.FileName+'_VT.dat','w') as fout:
			print('#'+json.dumps({'xlow':0.,'ylow':0.,'xhigh':self.width,'yhigh':self.height}),file=fout)
			d = np.array([[e.start[0],e.start[1],e.end[0],e.end[1],e.left[0],e.left[1],e.right[0],e.right[1]] for e in self.Edges]).reshape(len(self.Edges),8)
			np.savetxt(fout,np.hstack((np.arange(1,len(d)+1).reshape(len(d),1),d)),fmt="%d	%.9g %.9g %.9g %.9g	%.9g %.9g %.9g %.9g")
			if not self.Silent: print('>>',fout.name)
		with open(self.FileName+'_cells.dat','w') as fout:
			for n,(x,y) in enumerate(self.Points):
				c = self.Cells[n]
				print(f'{n:d}	{x:.9g} {y:.9g}	{len(c):d}	'+' '.join(f'{vx:.9g} {vy:.9g}' for vx,vy in c.vertices),file=fout)
			if not self.Silent: print('>>',fout.name)
		if self.Mode=='image':
			#SAOImage ds9 region file, the image is indexed from 1 there
			with open(self.FileName+'.reg','w') as freg:
				print('image',file=freg)
				for e in self.Edges:
					print("line(%.3f,%.3f,%.3f,%.3f) # tag={%g,%g,%g,%g}" % (e.start[1]+1,e.start[0]+1,e.end[1]+1,e.end[0]+1,e.left[1]+1,e.left[0]+1,e.right[1]+1,e.right[0]+1),file=freg)
				if not self.Silent: print('>>',freg.name)
		if self.Adj is not None:
			with open(self.FileName+'_adj.dat','w') as fout:
				for n,a in enumerate(self.Adj):
					print(f'{n:d}	'+' '.join(str(m) for m in a),file=fout)
				if not self.Silent: print('>>',fout.name)
	#END_OF_def saveresults(self):
#END_OF_class Voronoi(object):

def compute(points,width,height):
	"""
	Voronoi diagram of points, with unbounded edges extended to the box [0,width]x[0,height].
	Return {'edges':[Edge,...],'cells':[Polygon,...]}, cells[i] belongs to points[i].
	Fewer than two points give no edges and no cells.
	"""
	if len(points)<2: return {'edges':[],'cells':[]}
	vor = Voronoi(events=points,width=width,height=height,Silent=True)
	return {'edges':vor.Edges,'cells':vor.Cells}
