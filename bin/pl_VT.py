#!/usr/bin/env python
import os,sys
import numpy as np
import pylab as pl
import json
__doc__="""
Input the *_VT.dat file from bvt.py and optionally:
	the *_cells.dat file from bvt.py (the cells are filled),
	or "-s", which means plotting step by step.
"""

if len(sys.argv)<2 or '-h' in sys.argv:
	print(__doc__)
	exit()
if '-s' in sys.argv:
	sys.argv.remove('-s')
	Step=True
	pl.ion()
else: Step=False

VTfile=sys.argv[1]
with open(VTfile,'r') as fin:
	l=fin.readline()
	h=json.loads(l.strip('#'))
	d=np.loadtxt(fin,ndmin=2)
fig,ax=pl.subplots()
pl.xlim(h['xlow'],h['xhigh'])
pl.ylim(h['ylow'],h['yhigh'])
ax.set(adjustable='box', aspect='equal')
if len(sys.argv)>2 and os.path.isfile(sys.argv[2]):
	with open(sys.argv[2]) as fin:
		for l in fin:
			c=l.split()
			if int(c[3])<3: continue
			v=np.array(c[4:],dtype=float).reshape(-1,2)
			pl.fill(v[:,0],v[:,1],alpha=0.3)
for l in d:
	pl.plot([l[1],l[3]],[l[2],l[4]],'b-',lw=1)
	pl.plot([l[5],l[7]],[l[6],l[8]],'ro')
	if Step:
		#edges come in the order the sweep found them
		pl.title('edge %d/%d' % (l[0],len(d)))
		pl.pause(0.01)
		if input('Enter to continue, q to draw the rest: ').strip()=='q': Step=False
pl.ioff()
PngFile=VTfile.rsplit('.',1)[0]+'.png'
pl.savefig(PngFile,bbox_inches='tight')
print('>> '+PngFile)
pl.tight_layout()
pl.show()
