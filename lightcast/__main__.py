from lightcast.lightcastApp import main

main()
