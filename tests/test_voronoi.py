import json
import numpy as np
import pytest
from BeachlineVT import Voronoi,compute

def dist(p,q):
	return np.hypot(p[0]-q[0],p[1]-q[1])

def hull_size(points):
	#monotone chain
	P = sorted(map(tuple,points))
	cross = lambda o,a,b: (a[0]-o[0])*(b[1]-o[1])-(a[1]-o[1])*(b[0]-o[0])
	lower,upper = [],[]
	for p in P:
		while len(lower)>=2 and cross(lower[-2],lower[-1],p)<=0: lower.pop()
		lower.append(p)
	for p in reversed(P):
		while len(upper)>=2 and cross(upper[-2],upper[-1],p)<=0: upper.pop()
		upper.append(p)
	return len(lower)+len(upper)-2

@pytest.fixture(scope='module')
def random_points():
	rng = np.random.default_rng(20161001)
	return rng.uniform(0,100,size=(60,2))

@pytest.fixture(scope='module')
def vor(random_points):
	return Voronoi(events=random_points,width=100,height=100,Silent=True)

class TestScenarios:
	def test_triangle(self):
		res = compute([(0,0),(10,0),(5,10)],20,20)
		assert len(res['edges']) == 3
		assert len(res['cells']) == 3
		center = (5,3.75)
		far = []
		for e in res['edges']:
			if dist(e.start,center)<1e-9: far.append(e.end)
			else:
				assert dist(e.end,center)<1e-9
				far.append(e.start)
		assert sorted(far) == [pytest.approx((-10,11.25)),pytest.approx((5,-6.25)),pytest.approx((20,11.25))]
		for c in res['cells']:
			assert len(c) == 1
			assert c.first == pytest.approx(center)

	def test_two_points_side_by_side(self):
		res = compute([(0,5),(10,5)],10,10)
		assert len(res['cells']) == 2
		(e,) = res['edges']
		assert e.start == (5,10)
		assert e.end == (5,0)
		assert {e.left,e.right} == {(0,5),(10,5)}
		assert all(len(c) == 0 for c in res['cells'])

	def test_two_points_one_above_the_other(self):
		res = compute([(5,0),(5,10)],10,10)
		(e,) = res['edges']
		assert e.start == pytest.approx((15,5))
		assert e.end == pytest.approx((-5,5))

	def test_more_than_two_sites_at_the_top(self):
		points = [(0,5),(10,5),(20,5),(10,0)]
		res = compute(points,20,20)
		edges,cells = res['edges'],res['cells']
		assert len(edges) == 5
		v1,v2 = (5,2.5),(15,2.5)
		assert cells[0].vertices == [pytest.approx(v1)]
		assert cells[1].vertices == [pytest.approx(v2),pytest.approx(v1)]
		assert cells[2].vertices == [pytest.approx(v2)]
		assert cells[3].vertices == [pytest.approx(v1),pytest.approx(v2)]
		assert edges[0].start == (5,20) and edges[0].end == pytest.approx(v1)
		assert edges[1].start == (15,20) and edges[1].end == pytest.approx(v2)
		#the horizontal edge between (10,5) and (10,0)
		assert edges[2].start == pytest.approx(v2) and edges[2].end == pytest.approx(v1)

	@pytest.mark.parametrize('points,nv,ne',[
		([(0,10),(10,10),(7,10),(5,0)],2,5),
		([(0,10),(10,10),(20,10),(5,10),(8,0)],3,7),
		([(20,10),(5,10),(10,10),(0,10),(8,0)],3,7),
	])
	def test_top_row_in_any_order(self,points,nv,ne):
		vor = Voronoi(events=points,width=20,height=20,Silent=True)
		P = np.array(points,dtype=float)
		assert len(vor.Vertices) == nv
		assert len(vor.Edges) == ne
		for v,sites in vor.Vertices:
			r = [dist(v,s) for s in sites]
			assert r[1] == pytest.approx(r[0]) and r[2] == pytest.approx(r[0])
			assert np.min(np.hypot(*(P-v).T)) == pytest.approx(r[0])
		for e in vor.Edges:
			for p in (e.start,e.end):
				assert dist(p,e.left) == pytest.approx(dist(p,e.right))

	def test_top_row_order_does_not_change_the_vertices(self):
		a = Voronoi(events=[(0,10),(5,10),(10,10),(20,10),(8,0)],width=20,height=20,Silent=True)
		b = Voronoi(events=[(10,10),(20,10),(0,10),(5,10),(8,0)],width=20,height=20,Silent=True)
		assert sorted(v for v,_ in a.Vertices) == sorted(v for v,_ in b.Vertices)
		assert sorted(v for v,_ in a.Vertices) == [pytest.approx((2.5,3.8)),pytest.approx((7.5,5.3)),pytest.approx((15,3.8))]

	@pytest.mark.parametrize('points',[[],[(1,2)]])
	def test_insufficient_input(self,points):
		assert compute(points,10,10) == {'edges':[],'cells':[]}

	def test_duplicated_point(self):
		with pytest.warns(UserWarning,match='duplicated'):
			vor = Voronoi(events=[(5,5),(5,5),(0,0),(10,0)],width=10,height=10,Silent=True)
		assert len(vor.Cells) == 4
		assert vor.Cells[0] is vor.Cells[1]
		assert len(vor.Edges) == 3
		assert vor.Vertices[0][0] == pytest.approx((5,0))

	def test_cells_follow_input_order(self):
		points = [(10,0),(5,10),(0,0)]
		res = compute(points,20,20)
		for p,c in zip(points,res['cells']):
			assert dist(c.first,p) == pytest.approx(6.25)

class TestProperties:
	def test_one_cell_per_point(self,vor,random_points):
		assert len(vor.Cells) == len(random_points)

	def test_counts(self,vor,random_points):
		n = len(random_points)
		h = hull_size(random_points)
		assert len(vor.Vertices) == 2*n-2-h
		assert len(vor.Edges) == 3*n-3-h

	def test_edges_are_bisectors(self,vor):
		for e in vor.Edges:
			for p in (e.start,e.end,((e.start[0]+e.end[0])/2,(e.start[1]+e.end[1])/2)):
				assert dist(p,e.left) == pytest.approx(dist(p,e.right),rel=1e-6)

	def test_vertices_are_empty_circle_centers(self,vor,random_points):
		for v,sites in vor.Vertices:
			r = [dist(v,s) for s in sites]
			assert r[0] == pytest.approx(r[1],rel=1e-6)
			assert r[0] == pytest.approx(r[2],rel=1e-6)
			assert np.min(np.hypot(*(random_points-v).T)) == pytest.approx(r[0],rel=1e-6)

	def test_cell_vertices_nearest_to_own_site(self,vor,random_points):
		for p,c in zip(random_points,vor.Cells):
			assert len(c)>0
			for v in c.vertices:
				assert dist(v,p) == pytest.approx(np.min(np.hypot(*(random_points-v).T)),rel=1e-6)

	def test_idempotent(self,vor,random_points):
		again = Voronoi(events=random_points,width=100,height=100,Silent=True)
		assert np.allclose(again.getsegments(),vor.getsegments())
		assert [c.vertices for c in again.Cells] == [c.vertices for c in vor.Cells]

	def test_adjacency_is_symmetric(self,random_points):
		vor = Voronoi(events=random_points,width=100,height=100,Silent=True,caladj=True)
		assert len(vor.Adj) == len(random_points)
		for n,a in enumerate(vor.Adj):
			assert len(a)>=2
			for m in a: assert n in vor.Adj[m]

class TestVoronoi:
	def test_image_input(self):
		image = np.zeros((10,10))
		image[2,3] = image[7,6] = image[4,8] = 1
		vor = Voronoi(image=image,Silent=True)
		assert vor.Mode == 'image'
		assert vor.width == 9 and vor.height == 9
		assert sorted(vor.Points) == [(2,3),(4,8),(7,6)]
		assert len(vor.Edges) == 3
		assert vor.getsegments().shape == (3,4)

	def test_resolution(self):
		vor = Voronoi(events=[(0.12345,0),(10,0.0001),(5,10)],Resolution=2,width=20,height=20,Silent=True)
		assert vor.Points == [(0.12,0),(10,0),(5,10)]

	def test_default_box(self):
		vor = Voronoi(events=[(0.5,0.5),(3.2,7.9)],Silent=True)
		assert (vor.width,vor.height) == (5,9)

	def test_points_out_of_box(self):
		with pytest.warns(UserWarning,match='out of'):
			Voronoi(events=[(0,0),(30,0),(5,5)],width=10,height=10,Silent=True)

	@pytest.mark.parametrize('kwargs',[{},{'events':[1,2,3]},{'events':[(0,0)],'image':np.ones((2,2))},{'image':np.ones(3)},{'image':np.ones((3,3)),'Resolution':2}])
	def test_bad_input(self,kwargs):
		with pytest.raises(ValueError):
			Voronoi(Silent=True,**kwargs)

	def test_unknown_option(self):
		with pytest.raises(TypeError):
			Voronoi(events=[(0,0),(1,1)],Silent=True,calArea=True)

	def test_saveresults(self,tmp_path):
		name = str(tmp_path/'tri')
		vor = Voronoi(events=[(0,0),(10,0),(5,10)],width=20,height=20,FileName=name,Silent=True,caladj=True)
		vor.saveresults()
		with open(name+'_VT.dat') as fin:
			h = json.loads(fin.readline().strip('#'))
			d = np.loadtxt(fin,ndmin=2)
		assert h == {'xlow':0,'ylow':0,'xhigh':20,'yhigh':20}
		assert d.shape == (3,9)
		assert np.allclose(d[:,1:5],vor.getsegments())
		with open(name+'_cells.dat') as fin:
			rows = [l.split() for l in fin]
		assert [int(r[3]) for r in rows] == [1,1,1]
		assert [float(x) for x in rows[0][4:]] == pytest.approx([5,3.75])
		with open(name+'_adj.dat') as fin:
			assert [sorted(map(int,l.split()[1:])) for l in fin] == [[1,2],[0,2],[0,1]]
