#!/usr/bin/env python
################################################################################
#Voronoi Tessellation with Fortune's sweep line algorithm
################################################################################
import numpy as np
from astropy.io import fits
from BeachlineVT import Voronoi
import sys,warnings,os,getopt

def main():
	__doc__="""
	bvt.py File [options]

The input File can be:
	an image
		If the file has a ".fits" suffix. Each pixel >0 is a point.
	OR a list of coordinates
		It should be an ASCII file containing the point coordinates in its first two columns.

OPTIONS
	--width W, --height H	The box 0~W, 0~H to which unbounded edges are extended.
				Default: just covering the points.
	--resolution N		Round the input coordinates to the Nth decimal place.
	-A,--caladj		Calculate the neighbors of each point
	-s,--silent		No status output
	-d			Print every event (debug)
	-h/--help		Help

OUTPUT
	File_VT.dat, File_cells.dat (and File_adj.dat with -A, File.reg for an image)
		"""
	def usage():
		print(__doc__)
		exit()
	Options={}
	S_opt='dAhs'
	L_opt=['caladj','width=','height=','resolution=','help','silent']
	opts,args=getopt.getopt(sys.argv[1:],S_opt,L_opt)
	if len(args)>0:
		for arg in args:
			if os.path.isfile(arg):
				InputFile=arg
				sys.argv.remove(arg)
				break
		opts,args=getopt.getopt(sys.argv[1:],S_opt,L_opt)
	for opt,arg in opts:
		if opt == '--caladj' or opt == '-A':
			Options['caladj']=True
		elif opt == '--silent' or opt == '-s':
			Options['Silent']=True
			warnings.simplefilter('ignore')
		elif opt in ('--width','--height'):
			try:
				Options[opt[2:]] = float(arg)
			except ValueError:
				sys.exit('ERROR: '+opt+' '+arg)
		elif opt == '--resolution':
			try:
				n = int(arg)
				assert n>=0
			except (ValueError,AssertionError):
				sys.exit('ERROR: --resolution '+arg)
			Options['Resolution'] = n
		elif opt == "-h" or opt == "--help":
			usage()
		elif opt == '-d':
			Voronoi.debug = True
	if len(args)>0: sys.exit("I don't understand"+str(args))
	if 'InputFile' not in locals():
		sys.exit("Please input an image or a list of points!\n")

	Options['FileName']=InputFile.rsplit('.',1)[0]
	if len(InputFile.rsplit('.',1))>1 and InputFile.rsplit('.',1)[1] == 'fits':
		if 'Resolution' in Options: sys.exit('--resolution not supported in case of image input')
		data=fits.getdata(InputFile)
		#x is the first numpy axis, which is Y in ds9
		vor=Voronoi(image=data,**Options)
	else: #a file which stores the coordinates of points in the first two columns
		data=np.loadtxt(InputFile,ndmin=2)
		vor=Voronoi(events=data[:,:2],**Options)
	vor.saveresults()

if __name__ == '__main__':
	main()
