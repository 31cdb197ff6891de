from lead_finder.cli import main

main()
